"""
Redis Watcher for Runtime Report Configuration

Applies runtime updates of the reporting flag, destination and queue name
published on a Redis channel, so every instance switches without a restart.

Message format (any subset of the keys)::

    {"flowControl": true, "dest": "kafka", "queue": "fizz_resource_access_stat"}
"""

import asyncio
import json
from typing import Any, Dict, Optional

import structlog
from redis.asyncio import Redis

from flowstat.core.config.runtime import FlowStatRuntimeConfig
from flowstat.core.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


class FlowStatConfigWatcher:
    """
    Redis pub/sub listener updating a `FlowStatRuntimeConfig`.
    """

    def __init__(self, redis_client: Redis, runtime_config: FlowStatRuntimeConfig, channel: str):
        self._redis = redis_client
        self._runtime_config = runtime_config
        self.channel = channel
        self._listener: Optional[asyncio.Task] = None

    async def publish(self, **changes: Any) -> int:
        """Notify every instance of a change; returns the subscriber count."""
        payload: Dict[str, Any] = {}
        if "enabled" in changes:
            payload["flowControl"] = changes["enabled"]
        for key in ("dest", "queue"):
            if key in changes:
                payload[key] = changes[key]
        return await self._redis.publish(self.channel, json.dumps(payload))

    def handle_message(self, data: Any) -> None:
        """Apply one channel message; invalid messages are logged and ignored."""
        try:
            payload = json.loads(data)
            if not isinstance(payload, dict):
                raise ValueError("payload must be an object")
            self._runtime_config.apply_payload(payload)
        except (ValueError, ConfigurationError) as e:
            logger.warning("flow_stat_config_message_invalid", channel=self.channel, error=str(e))

    async def listen(self) -> None:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self.channel)
        logger.info("flow_stat_config_listening", channel=self.channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") == "message":
                    self.handle_message(message["data"])
        finally:
            await pubsub.unsubscribe(self.channel)
            await pubsub.aclose()

    def start(self) -> asyncio.Task:
        if self._listener is None or self._listener.done():
            self._listener = asyncio.get_running_loop().create_task(self.listen())
        return self._listener

    async def stop(self) -> None:
        if self._listener is None:
            return
        self._listener.cancel()
        try:
            await self._listener
        except asyncio.CancelledError:
            pass
        self._listener = None
