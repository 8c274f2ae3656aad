"""Application lifecycle management.

This module handles application startup and shutdown events: the Redis
connection, the rate limit registry mirror, the runtime configuration
watcher and the report scheduler.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.exceptions import RedisError

from flowstat.core.config.settings import settings
from flowstat.core.logging import logger
from flowstat.core.scheduler import create_report_scheduler
from flowstat.infrastructure.dependency_injection.reporter_dependencies import build_reporter
from flowstat.infrastructure.redis import create_redis

SHUTDOWN_DRAIN_SECONDS = 5.0


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the reporter on startup and stop it on shutdown.

        A registry that cannot be loaded is not fatal: records are reported
        with configuration id 0 until the update channel fills it.
        """
        redis = create_redis()
        reporter = build_reporter(redis, settings)

        try:
            await reporter.registry.load()
        except RedisError as e:
            logger.warning("rate_limit_configs_unavailable", error=str(e))
        reporter.registry.start()
        reporter.config_watcher.start()

        scheduler = create_report_scheduler(reporter.service.tick, settings.FLOW_STAT_SCHED_CRON)
        scheduler.start()

        app.state.redis = redis
        app.state.reporter = reporter
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            server_ip=reporter.server_ip,
            cron=settings.FLOW_STAT_SCHED_CRON,
        )

        yield

        scheduler.shutdown(wait=False)
        await reporter.config_watcher.stop()
        await reporter.registry.stop()
        await reporter.queue_dispatcher.drain(timeout=SHUTDOWN_DRAIN_SECONDS)
        await redis.aclose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
