"""
Rate limit configuration registry adapters.

InMemoryResourceRateLimitConfigRepository keeps configurations in a dict
keyed by resource. RedisResourceRateLimitConfigRepository fills the same
dict from the gateway's Redis hash and keeps it current from the update
channel, so lookups during a tick never touch the network.
"""

import asyncio
import json
from typing import Any, Dict, Iterable, Optional

import structlog
from redis.asyncio import Redis

from flowstat.core.exceptions import RegistryError
from flowstat.domain.flow_stats.entities import ResourceRateLimitConfig
from flowstat.domain.flow_stats.repositories import ResourceRateLimitConfigRepository

logger = structlog.get_logger(__name__)


def parse_config(raw: Any) -> ResourceRateLimitConfig:
    """Parse one JSON-encoded configuration.

    Raises:
        RegistryError: When the payload is not a valid configuration.
    """
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
        if not isinstance(data, dict):
            raise RegistryError(
                "Invalid rate limit config: expected a JSON object", code="invalid_config"
            )
        return ResourceRateLimitConfig.from_dict(data)
    except (TypeError, ValueError, KeyError) as e:
        raise RegistryError(f"Invalid rate limit config: {e}", code="invalid_config") from e


class InMemoryResourceRateLimitConfigRepository(ResourceRateLimitConfigRepository):
    """Dictionary-backed registry."""

    def __init__(self, configs: Optional[Iterable[ResourceRateLimitConfig]] = None):
        self._configs: Dict[str, ResourceRateLimitConfig] = {}
        for config in configs or ():
            self.save(config)

    def get_resource_rate_limit_config(self, resource: str) -> Optional[ResourceRateLimitConfig]:
        return self._configs.get(resource)

    def save(self, config: ResourceRateLimitConfig) -> None:
        """Insert or replace; a deleted configuration is removed instead."""
        if config.is_deleted:
            self._configs.pop(config.resource, None)
        else:
            self._configs[config.resource] = config

    def remove(self, resource: str) -> None:
        self._configs.pop(resource, None)

    def replace_all(self, configs: Iterable[ResourceRateLimitConfig]) -> None:
        self._configs = {c.resource: c for c in configs if not c.is_deleted}

    def __len__(self) -> int:
        return len(self._configs)


class RedisResourceRateLimitConfigRepository(InMemoryResourceRateLimitConfigRepository):
    """Registry mirrored from Redis.

    The hash holds one JSON configuration per field. Each message on the
    channel is one JSON configuration; ``isDeleted`` removes it.
    """

    def __init__(self, redis_client: Redis, hash_key: str, channel: str):
        super().__init__()
        self._redis = redis_client
        self._hash_key = hash_key
        self._channel = channel
        self._listener: Optional[asyncio.Task] = None

    async def load(self) -> int:
        """Load every configuration of the hash, replacing the current content.

        Malformed entries are skipped and logged.

        Returns:
            Number of configurations loaded.
        """
        entries = await self._redis.hgetall(self._hash_key)
        configs = []
        for field_name, raw in entries.items():
            try:
                configs.append(parse_config(raw))
            except RegistryError as e:
                logger.warning("rate_limit_config_skipped", field=field_name, error=str(e))
        self.replace_all(configs)
        logger.info("rate_limit_configs_loaded", hash=self._hash_key, count=len(self))
        return len(self)

    def apply_message(self, raw: Any) -> None:
        """Apply one update message from the channel."""
        try:
            config = parse_config(raw)
        except RegistryError as e:
            logger.warning("rate_limit_config_message_invalid", error=str(e))
            return
        self.save(config)
        logger.debug(
            "rate_limit_config_updated",
            resource=config.resource,
            id=config.id,
            deleted=config.is_deleted,
        )

    async def listen(self) -> None:
        """Consume the update channel until cancelled."""
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        logger.info("rate_limit_config_listening", channel=self._channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") == "message":
                    self.apply_message(message["data"])
        finally:
            await pubsub.unsubscribe(self._channel)
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
