"""
Runtime (hot-reloadable) configuration of the flow statistics report.

The reporting job reads one `FlowStatSnapshot` at the start of every tick.
Updates replace the whole snapshot, so a tick never observes a half-applied
change.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from flowstat.core.config.flow_stat import DEFAULT_QUEUE, DEST_REDIS
from flowstat.core.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

# Keys accepted in update payloads, in the naming used by the config center
_PAYLOAD_KEYS = {
    "flowControl": "enabled",
    "dest": "dest",
    "queue": "queue",
}

_FLAG_ADAPTER = TypeAdapter(bool)


@dataclass(frozen=True, slots=True)
class FlowStatSnapshot:
    """Immutable view of the refreshable reporting configuration."""
    enabled: bool = False
    dest: str = DEST_REDIS
    queue: str = DEFAULT_QUEUE


class FlowStatRuntimeConfig:
    """Holder of the current `FlowStatSnapshot`."""

    def __init__(self, initial: Optional[FlowStatSnapshot] = None):
        self._snapshot = initial or FlowStatSnapshot()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> FlowStatRuntimeConfig:
        return cls(
            FlowStatSnapshot(
                enabled=settings.FLOW_CONTROL,
                dest=settings.FLOW_STAT_SCHED_DEST,
                queue=settings.FLOW_STAT_SCHED_QUEUE,
            )
        )

    def current(self) -> FlowStatSnapshot:
        return self._snapshot

    def update(self, **changes: Any) -> FlowStatSnapshot:
        """
        Apply a partial update and return the new snapshot.

        Args:
            **changes: Any of ``enabled``, ``dest``, ``queue``.

        Raises:
            ConfigurationError: On unknown keys, an empty queue name or a
                flag that is not a boolean ("true"/"false" strings are accepted).
        """
        unknown = set(changes) - {"enabled", "dest", "queue"}
        if unknown:
            raise ConfigurationError(
                f"Unknown flow stat settings: {', '.join(sorted(unknown))}",
                code="unknown_setting",
            )
        if "queue" in changes and not changes["queue"]:
            raise ConfigurationError("Queue name must not be empty", code="empty_queue")
        if "dest" in changes:
            changes["dest"] = str(changes["dest"] or DEST_REDIS).strip().lower()
        if "enabled" in changes:
            try:
                changes["enabled"] = _FLAG_ADAPTER.validate_python(changes["enabled"])
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid flow control flag: {changes['enabled']!r}",
                    code="invalid_flag",
                ) from e

        with self._lock:
            self._snapshot = replace(self._snapshot, **changes)
            snapshot = self._snapshot

        logger.info(
            "flow_stat_config_updated",
            enabled=snapshot.enabled,
            dest=snapshot.dest,
            queue=snapshot.queue,
        )
        return snapshot

    def apply_payload(self, payload: Mapping[str, Any]) -> FlowStatSnapshot:
        """Apply an update expressed with config-center key names."""
        changes = {
            attr: payload[key] for key, attr in _PAYLOAD_KEYS.items() if key in payload
        }
        if not changes:
            return self._snapshot
        return self.update(**changes)
