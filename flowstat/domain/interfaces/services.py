"""Service interfaces used by the domain layer.

Infrastructure implements these so the reporting job stays independent of
the transport behind each sink.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Optional

from flowstat.domain.flow_stats.value_objects import ReportRecord


class IRecordDispatcher(ABC):
    """Interface for handing report records to a telemetry sink.

    Dispatch never blocks the caller on delivery. Implementations may return
    an awaitable tracking the delivery; the reporting job does not await it.
    """

    #: Name used in logs and metrics, e.g. "redis" or "kafka"
    dest: str

    @abstractmethod
    def dispatch(self, record: ReportRecord, message: str, queue: str) -> Optional[Awaitable[None]]:
        """Hand one serialized record to the sink.

        Args:
            record: The record being sent
            message: ``record`` serialized with ``ReportRecord.to_message``
            queue: Target queue, channel or topic name
        """
        raise NotImplementedError
