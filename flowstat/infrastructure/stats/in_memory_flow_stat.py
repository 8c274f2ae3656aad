"""
In-process store of completed statistics windows.

The gateway's statistics engine aggregates requests into windows on its own;
this store only keeps the windows it is handed and answers range queries the
way the engine does. It backs local runs and tests.
"""

import threading
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from flowstat.core.exceptions import StatsSourceError
from flowstat.domain.flow_stats.repositories import FlowStatSource
from flowstat.domain.flow_stats.value_objects import (
    WINDOW_SIZE_SECONDS,
    ResourceTimeWindowStat,
    TimeWindowStat,
)


def _now_slot() -> int:
    # Current time truncated to the second, in milliseconds
    return int(time.time()) * 1000


class InMemoryFlowStatSource(FlowStatSource):
    """Thread-safe in-memory FlowStatSource."""

    def __init__(self, clock: Callable[[], int] = _now_slot):
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, Dict[int, TimeWindowStat]] = defaultdict(dict)

    def current_time_slot_id(self) -> int:
        return self._clock()

    def record_window(self, resource_id: str, window: TimeWindowStat) -> None:
        """Store a completed window, replacing any window with the same start."""
        with self._lock:
            self._windows[resource_id][window.start_time] = window

    def evict_before(self, timestamp: int) -> int:
        """Drop windows starting before ``timestamp``; returns how many were dropped."""
        dropped = 0
        with self._lock:
            for resource_id in list(self._windows):
                windows = self._windows[resource_id]
                for start in [s for s in windows if s < timestamp]:
                    del windows[start]
                    dropped += 1
                if not windows:
                    del self._windows[resource_id]
        return dropped

    def get_resource_time_window_stats(
        self,
        resource_filter: Optional[str],
        start: int,
        end: int,
        window_size_seconds: int = WINDOW_SIZE_SECONDS,
    ) -> List[ResourceTimeWindowStat]:
        if window_size_seconds != WINDOW_SIZE_SECONDS:
            raise StatsSourceError(
                f"Only {WINDOW_SIZE_SECONDS}s windows are stored, got {window_size_seconds}s"
            )
        with self._lock:
            if resource_filter is not None:
                candidates = {resource_filter: self._windows.get(resource_filter, {})}
            else:
                candidates = self._windows
            result = []
            for resource_id, windows in candidates.items():
                in_range = tuple(
                    windows[s] for s in sorted(windows) if start <= s < end
                )
                if in_range:
                    result.append(ResourceTimeWindowStat(resource_id=resource_id, windows=in_range))
        return result
