"""
Flow Statistics Domain Repositories

Interfaces of the two collaborators the reporter reads from. The statistics
engine and the rate limit registry live outside this service's domain; these
contracts are all the reporting job knows about them.

Repositories:
- FlowStatSource: Completed per-resource statistics windows
- ResourceRateLimitConfigRepository: Resource identifier to configuration lookup
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import ResourceRateLimitConfig
from .value_objects import ResourceTimeWindowStat, WINDOW_SIZE_SECONDS


class FlowStatSource(ABC):
    """
    Read-only query interface of the statistics engine.
    """

    @abstractmethod
    def current_time_slot_id(self) -> int:
        """
        Return the engine's current time slot.

        Returns:
            Epoch milliseconds of the slot the engine is writing to now.
        """
        pass

    @abstractmethod
    def get_resource_time_window_stats(
        self,
        resource_filter: Optional[str],
        start: int,
        end: int,
        window_size_seconds: int = WINDOW_SIZE_SECONDS,
    ) -> Optional[List[ResourceTimeWindowStat]]:
        """
        Return the windows of every resource whose start lies in ``[start, end)``.

        Args:
            resource_filter: Restrict the result to one resource, None for all
            start: Range start, epoch milliseconds (inclusive)
            end: Range end, epoch milliseconds (exclusive)
            window_size_seconds: Size of the windows to aggregate to

        Returns:
            One entry per resource with data in range. An empty list (or None)
            when the engine holds nothing for the range; this is not an error.
        """
        pass


class ResourceRateLimitConfigRepository(ABC):
    """
    Lookup interface of the rate limit configuration registry.
    """

    @abstractmethod
    def get_resource_rate_limit_config(self, resource: str) -> Optional[ResourceRateLimitConfig]:
        """
        Look a resource up by identifier.

        Returns:
            The configuration, or None when the registry has no entry.
        """
        pass
