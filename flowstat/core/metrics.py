"""
Metrics collection module for monitoring the reporting job.
"""
import threading
from datetime import datetime, timezone
from typing import Any, Dict


class MetricsCollector:
    """
    Collects and manages reporter metrics.

    This class keeps in-process counters for:
    - Reporting ticks, by outcome (warmup, empty, reported)
    - Records dispatched, by destination
    - Dispatch failures, by destination
    - Resources whose processing failed during a tick

    Counters are updated from the event loop and from redis publish callbacks,
    so updates go through a lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._metrics: Dict[str, Any] = {}
        self.reset_metrics()

    def _increment(self, section: str, key: str, amount: int = 1) -> None:
        with self._lock:
            bucket = self._metrics[section]
            bucket[key] = bucket.get(key, 0) + amount

    def record_tick(self, outcome: str) -> None:
        """Record the outcome of one reporting tick."""
        self._increment("ticks", outcome)

    def record_dispatch(self, dest: str, count: int = 1) -> None:
        """Record records handed to a sink."""
        self._increment("dispatched", dest, count)

    def record_dispatch_failure(self, dest: str) -> None:
        """Record a publish that failed after hand-off."""
        self._increment("dispatch_failed", dest)

    def record_resource_failure(self, resource: str) -> None:
        """Record a resource skipped because its processing raised."""
        self._increment("resource_failed", resource)

    def get_metrics(self) -> Dict[str, Any]:
        """Get a copy of all collected metrics."""
        with self._lock:
            snapshot = {section: dict(values) for section, values in self._metrics.items()
                        if isinstance(values, dict)}
            snapshot["uptime"] = (datetime.now(timezone.utc) - self._start_time).total_seconds()
        return snapshot

    def reset_metrics(self) -> None:
        """Reset all metrics to initial state."""
        with self._lock:
            self._metrics = {
                "ticks": {},
                "dispatched": {},
                "dispatch_failed": {},
                "resource_failed": {},
            }
            self._start_time = datetime.now(timezone.utc)


# Global metrics collector instance
metrics_collector = MetricsCollector()
