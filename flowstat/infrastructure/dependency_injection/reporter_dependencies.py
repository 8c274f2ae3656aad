"""Dependency wiring for the flow statistics reporter.

Builds the reporting job from its collaborators and exposes the assembled
components to FastAPI routes through ``app.state``.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from redis.asyncio import Redis

from flowstat.core.config.runtime import FlowStatRuntimeConfig
from flowstat.core.metrics import MetricsCollector, metrics_collector
from flowstat.domain.flow_stats.repositories import FlowStatSource
from flowstat.domain.flow_stats.services import RecordBuilder, ResourceClassifier
from flowstat.domain.services.flow_stat_report_service import FlowStatReportService
from flowstat.infrastructure.network import resolve_server_ip
from flowstat.infrastructure.repositories.rate_limit_config_repository import (
    RedisResourceRateLimitConfigRepository,
)
from flowstat.infrastructure.services.config_watcher import FlowStatConfigWatcher
from flowstat.infrastructure.services.record_dispatchers import (
    LogPipelineRecordDispatcher,
    RedisQueueRecordDispatcher,
)
from flowstat.infrastructure.stats.in_memory_flow_stat import InMemoryFlowStatSource


@dataclass
class ReporterComponents:
    """Everything the lifespan starts, stops and the API inspects."""
    server_ip: str
    runtime_config: FlowStatRuntimeConfig
    stats_source: FlowStatSource
    registry: RedisResourceRateLimitConfigRepository
    queue_dispatcher: RedisQueueRecordDispatcher
    config_watcher: FlowStatConfigWatcher
    service: FlowStatReportService


def build_reporter(
    redis_client: Redis,
    settings,
    stats_source: Optional[FlowStatSource] = None,
    metrics: MetricsCollector = metrics_collector,
) -> ReporterComponents:
    """Assemble the reporting job.

    Args:
        redis_client: Client shared by the queue sink, registry and watcher
        settings: Application settings
        stats_source: The statistics engine; an in-memory store when omitted
        metrics: Collector for tick and dispatch counters
    """
    server_ip = resolve_server_ip(settings.SERVER_IP)
    runtime_config = FlowStatRuntimeConfig.from_settings(settings)
    stats_source = stats_source or InMemoryFlowStatSource()
    registry = RedisResourceRateLimitConfigRepository(
        redis_client,
        hash_key=settings.RATE_LIMIT_CONFIG_HASH,
        channel=settings.RATE_LIMIT_CONFIG_CHANNEL,
    )
    queue_dispatcher = RedisQueueRecordDispatcher(redis_client, metrics=metrics)
    log_dispatcher = LogPipelineRecordDispatcher()

    service = FlowStatReportService(
        stats_source=stats_source,
        classifier=ResourceClassifier(registry),
        record_builder=RecordBuilder(server_ip),
        dispatchers={
            queue_dispatcher.dest: queue_dispatcher,
            log_dispatcher.dest: log_dispatcher,
        },
        runtime_config=runtime_config,
        metrics=metrics,
    )
    return ReporterComponents(
        server_ip=server_ip,
        runtime_config=runtime_config,
        stats_source=stats_source,
        registry=registry,
        queue_dispatcher=queue_dispatcher,
        config_watcher=FlowStatConfigWatcher(
            redis_client, runtime_config, channel=settings.FLOW_STAT_CONFIG_CHANNEL
        ),
        service=service,
    )


def get_reporter(request: Request) -> Optional[ReporterComponents]:
    """FastAPI dependency returning the running reporter, if started."""
    return getattr(request.app.state, "reporter", None)
