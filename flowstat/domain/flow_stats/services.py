"""
Flow Statistics Domain Services

Pure building blocks of the report pipeline:

- align_report_window: Picks the most recent fully elapsed window
- ResourceClassifier: Resolves a resource to its configuration id and type
- RecordBuilder: Turns the windows of one resource into report records
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .entities import ClassifiedResource
from .repositories import ResourceRateLimitConfigRepository
from .value_objects import (
    GLOBAL_RESOURCE,
    WINDOW_SIZE_MILLIS,
    ReportRecord,
    ReportWindow,
    ResourceType,
    TimeWindowStat,
)


def second_of_minute(time_slot: int) -> int:
    """Seconds-within-minute (0-59) of an epoch millisecond timestamp."""
    return datetime.fromtimestamp(time_slot / 1000, tz=timezone.utc).second


def elapsed_seconds_in_window(second: int) -> int:
    """
    Seconds elapsed since the last 10 second boundary.

    The cascade is kept branch for branch: it equals ``second % 10`` on the
    whole 0-59 range, with the 50-59 band folded onto the 50 boundary.
    """
    if second > 49:
        return second - 50
    elif second > 39:
        return second - 40
    elif second > 29:
        return second - 30
    elif second > 19:
        return second - 20
    elif second > 9:
        return second - 10
    elif second > 0:
        return second - 0
    return 0


def align_report_window(current_slot: int) -> ReportWindow:
    """
    Compute the most recent completed 10 second window before ``current_slot``.

    The partially elapsed part of the current window is discounted so the
    report never reads a bucket the engine is still writing to.

    Args:
        current_slot: The engine's current time slot, epoch milliseconds

    Returns:
        ReportWindow: ``[end - 10s, end)`` where ``end <= current_slot``
    """
    interval = elapsed_seconds_in_window(second_of_minute(current_slot))
    recent_end_time_slot = current_slot - interval * 1000
    start_time_slot = recent_end_time_slot - WINDOW_SIZE_MILLIS
    return ReportWindow(start=start_time_slot, end=recent_end_time_slot)


def classify_resource_type(resource: str) -> ResourceType:
    """GLOBAL for the sentinel, API for paths, SERVICE for everything else."""
    if resource == GLOBAL_RESOURCE:
        return ResourceType.GLOBAL
    if resource.startswith("/"):
        return ResourceType.API
    return ResourceType.SERVICE


class ResourceClassifier:
    """Resolves resources against the rate limit registry. Holds no state."""

    def __init__(self, registry: ResourceRateLimitConfigRepository):
        self._registry = registry

    def config_id(self, resource: str) -> int:
        config = self._registry.get_resource_rate_limit_config(resource)
        return 0 if config is None else config.id

    def classify(self, resource: str) -> ClassifiedResource:
        return ClassifiedResource(
            resource=resource,
            config_id=self.config_id(resource),
            type=classify_resource_type(resource),
        )


class RecordBuilder:
    """
    Builds report records stamped with this server's address.

    The address is resolved once at startup and never changes afterwards.
    """

    def __init__(self, server_ip: str):
        self.server_ip = server_ip

    def build(self, resource: ClassifiedResource, window: TimeWindowStat) -> ReportRecord:
        return ReportRecord(
            ip=self.server_ip,
            id=resource.config_id,
            resource=resource.resource,
            type=resource.type,
            start=window.start_time,
            reqs=window.total,
            complete_reqs=window.comp_reqs,
            peak_concurrents=window.peak_concurrent_requests,
            req_per_sec=window.requests_per_second,
            block_reqs=window.block_requests,
            errors=window.errors,
            avg_resp_time=window.avg_rt,
            max_resp_time=window.max,
            min_resp_time=window.min,
        )

    def build_all(
        self, resource: ClassifiedResource, windows: Optional[Iterable[TimeWindowStat]]
    ) -> List[ReportRecord]:
        """One record per window, in window order."""
        return [self.build(resource, window) for window in windows or ()]
