"""
Flow Statistics Value Objects

Immutable value objects describing what the statistics engine produces and
what the reporter sends out.

Value Objects:
- TimeWindowStat: One 10 second statistics bucket of one resource
- ResourceTimeWindowStat: The buckets of one resource, in time order
- ResourceType: Coarse classification of a resource identifier
- ReportWindow: The half-open time range a tick reports on
- ReportRecord: One (resource, window) record ready for a sink

Design Principles:
- Immutability: Engine output is read-only to the reporter
- No validation: Values produced by the engine are passed through unchanged
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Optional, Tuple, Union

# Reserved resource identifier of the gateway-wide catch-all
GLOBAL_RESOURCE = "GLOBAL"

WINDOW_SIZE_SECONDS = 10
WINDOW_SIZE_MILLIS = WINDOW_SIZE_SECONDS * 1000


class ResourceType(IntEnum):
    """
    Resource types, numbered as in the rate limit registry.

    SERVICE_DEFAULT exists in the registry only; the reporter never infers it.
    """
    GLOBAL = 1
    SERVICE_DEFAULT = 2
    SERVICE = 3
    API = 4


@dataclass(frozen=True, slots=True)
class TimeWindowStat:
    """
    Aggregated statistics of one fixed-duration bucket.

    Field names follow the statistics engine. Response times are in
    milliseconds; ``rps`` may be absent when the engine has not computed it.
    """
    start_time: int
    total: int = 0
    comp_reqs: int = 0
    peak_concurrent_requests: int = 0
    rps: Optional[Decimal] = None
    block_requests: int = 0
    errors: int = 0
    avg_rt: Optional[int] = None
    min: Optional[int] = None
    max: Optional[int] = None

    @property
    def requests_per_second(self) -> float:
        """``rps`` as a float, 0.0 when absent."""
        if self.rps is None:
            return 0.00
        return float(self.rps)


@dataclass(frozen=True, slots=True)
class ResourceTimeWindowStat:
    """The windows recorded for one resource."""
    resource_id: str
    windows: Tuple[TimeWindowStat, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable from callers while keeping the object immutable
        if not isinstance(self.windows, tuple):
            object.__setattr__(self, "windows", tuple(self.windows))


@dataclass(frozen=True, slots=True)
class ReportWindow:
    """Half-open range ``[start, end)`` of epoch milliseconds."""
    start: int
    end: int

    @property
    def duration_millis(self) -> int:
        return self.end - self.start


Scalar = Union[str, int, float, None]


def _json_value(value: Scalar) -> str:
    if value is None:
        return "null"
    if isinstance(value, str):
        # Resource identifiers never carry quotes, so no escaping is applied
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True, slots=True)
class ReportRecord:
    """
    One report line for a (resource, window) pair.

    Records are transient: built, serialized and forwarded within a tick.
    """
    ip: str
    id: int
    resource: str
    type: ResourceType
    start: int
    reqs: int
    complete_reqs: int
    peak_concurrents: int
    req_per_sec: float
    block_reqs: int
    errors: int
    avg_resp_time: Optional[int]
    max_resp_time: Optional[int]
    min_resp_time: Optional[int]

    def fields(self) -> Tuple[Tuple[str, Scalar], ...]:
        """Wire names and values, in wire order."""
        return (
            ("ip", self.ip),
            ("id", self.id),
            ("resource", self.resource),
            ("type", int(self.type)),
            ("start", self.start),
            ("reqs", self.reqs),
            ("completeReqs", self.complete_reqs),
            ("peakConcurrents", self.peak_concurrents),
            ("reqPerSec", self.req_per_sec),
            ("blockReqs", self.block_reqs),
            ("errors", self.errors),
            ("avgRespTime", self.avg_resp_time),
            ("maxRespTime", self.max_resp_time),
            ("minRespTime", self.min_resp_time),
        )

    def to_message(self) -> str:
        """Serialize to the single-line flat object sent to sinks."""
        body = ",".join(f'"{name}":{_json_value(value)}' for name, value in self.fields())
        return "{" + body + "}"
