"""
Redis Connection Module

This module provides the asynchronous Redis client shared by the queue
dispatcher, the rate limit registry and the runtime configuration watcher.

Functions:
    create_redis: Builds a client from the application settings.
"""

from redis.asyncio import Redis
import logging

from flowstat.core.config.settings import settings

logger = logging.getLogger(__name__)


def create_redis(url: str = None) -> Redis:
    """
    Create an asynchronous Redis client.

    Args:
        url: Connection URL, defaults to ``settings.REDIS_URL``.

    Returns:
        Redis: A client decoding responses as UTF-8 strings.
    """
    redis = Redis.from_url(url or settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    logger.debug("Redis connection created")
    return redis

