"""Record Dispatcher Infrastructure Services.

Concrete sinks for report records:

- RedisQueueRecordDispatcher: publishes to a Redis pub/sub channel without
  waiting for the result
- LogPipelineRecordDispatcher: emits the record on a dedicated structlog
  channel that the log shipper forwards to a Kafka topic
"""

import asyncio
from typing import Optional, Set

import structlog
from redis.asyncio import Redis

from flowstat.core.config.flow_stat import DEST_KAFKA, DEST_REDIS
from flowstat.core.exceptions import DispatchError
from flowstat.core.metrics import MetricsCollector, metrics_collector
from flowstat.domain.flow_stats.value_objects import ReportRecord
from flowstat.domain.interfaces.services import IRecordDispatcher

logger = structlog.get_logger(__name__)

PIPELINE_LOGGER_NAME = "flowstat.pipeline"

# Context key read by the log shipper to pick its delivery strategy
HANDLE_STRATEGY_KEY = "handle_stgy"


class RedisQueueRecordDispatcher(IRecordDispatcher):
    """Fire-and-forget Redis publisher.

    Every dispatch schedules one ``PUBLISH`` on the running event loop and
    returns the task immediately. Failures are logged and counted from the
    task's done callback; they never reach the caller.
    """

    dest = DEST_REDIS

    def __init__(self, redis_client: Redis, metrics: MetricsCollector = metrics_collector):
        """Initialize with a Redis client.

        Args:
            redis_client: Redis async client used for publishing
            metrics: Collector receiving publish failure counts
        """
        self._redis = redis_client
        self._metrics = metrics
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of publishes not completed yet."""
        return len(self._pending)

    def dispatch(self, record: ReportRecord, message: str, queue: str) -> asyncio.Task:
        """Schedule the publish of ``message`` to ``queue``.

        Raises:
            DispatchError: When called outside a running event loop.
        """
        try:
            task = asyncio.get_running_loop().create_task(self._redis.publish(queue, message))
        except RuntimeError as e:
            raise DispatchError(f"No running event loop to publish to {queue}") from e

        self._pending.add(task)
        task.add_done_callback(
            lambda t: self._on_published(t, queue, record.resource, record.start)
        )
        return task

    def _on_published(self, task: asyncio.Task, queue: str, resource: str, start: int) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._metrics.record_dispatch_failure(self.dest)
            logger.error(
                "flow_stat_publish_failed",
                queue=queue,
                resource=resource,
                start=start,
                error=str(error),
            )

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight publishes, used on shutdown."""
        if not self._pending:
            return
        done, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        if not_done:
            logger.warning("flow_stat_publish_drain_timeout", pending=len(not_done))


class LogPipelineRecordDispatcher(IRecordDispatcher):
    """Emits records on the log pipeline channel.

    The message is logged as the event itself, tagged with the delivery
    strategy and the target topic. Buffering and retries belong to the log
    shipper.
    """

    dest = DEST_KAFKA

    def __init__(self, pipeline_logger=None):
        self._logger = pipeline_logger or structlog.get_logger(PIPELINE_LOGGER_NAME)

    def dispatch(self, record: ReportRecord, message: str, queue: str) -> None:
        self._logger.info(message, **{HANDLE_STRATEGY_KEY: DEST_KAFKA, "topic": queue})
        return None
