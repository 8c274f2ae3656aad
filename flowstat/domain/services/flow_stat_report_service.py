"""Flow Statistics Report Service.

Orchestrates one reporting tick: it reads the runtime configuration, skips
the first tick after startup, aligns the report window, queries the
statistics engine and fans the result out as one record per
(resource, window) pair to the configured sink.

States:
- DISABLED: the flow control flag is off, ticks do nothing
- WARMUP: the flag is on and no tick has been observed yet
- ACTIVE: every tick runs the full pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

import structlog

from flowstat.core.config.flow_stat import DEST_KAFKA, DEST_REDIS
from flowstat.core.config.runtime import FlowStatRuntimeConfig
from flowstat.core.metrics import MetricsCollector, metrics_collector
from flowstat.domain.flow_stats.entities import ClassifiedResource
from flowstat.domain.flow_stats.repositories import FlowStatSource
from flowstat.domain.flow_stats.services import (
    RecordBuilder,
    ResourceClassifier,
    align_report_window,
)
from flowstat.domain.flow_stats.value_objects import (
    WINDOW_SIZE_SECONDS,
    ReportWindow,
    TimeWindowStat,
)
from flowstat.domain.interfaces.services import IRecordDispatcher
from flowstat.utils.datetime import to_dp19

logger = structlog.get_logger(__name__)
# stdlib logger behind `logger`; its level gates the per-record trace
_trace_logger = logging.getLogger(__name__)


class ReportingState(str, Enum):
    DISABLED = "disabled"
    WARMUP = "warmup"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class TickReport:
    """What a single tick did."""
    state: ReportingState
    window: Optional[ReportWindow] = None
    resources: int = 0
    records: int = 0
    failed_resources: int = 0


class FlowStatReportService:
    """Periodic flow statistics reporting job.

    Ticks are expected not to overlap; the scheduler guarantees it. The only
    state carried between ticks is whether the warm-up tick has been seen.
    """

    def __init__(
        self,
        stats_source: FlowStatSource,
        classifier: ResourceClassifier,
        record_builder: RecordBuilder,
        dispatchers: Mapping[str, IRecordDispatcher],
        runtime_config: FlowStatRuntimeConfig,
        metrics: MetricsCollector = metrics_collector,
    ):
        """Initialize the job.

        Args:
            stats_source: Statistics engine query interface
            classifier: Resource classifier backed by the rate limit registry
            record_builder: Builder stamped with this server's address
            dispatchers: Sinks by destination name; must contain "redis" and "kafka"
            runtime_config: Holder of the refreshable flag, destination and queue
            metrics: Collector for tick and dispatch counters
        """
        missing = {DEST_REDIS, DEST_KAFKA} - set(dispatchers)
        if missing:
            raise ValueError(f"Missing dispatchers for: {', '.join(sorted(missing))}")
        self._stats_source = stats_source
        self._classifier = classifier
        self._record_builder = record_builder
        self._dispatchers = dict(dispatchers)
        self._runtime_config = runtime_config
        self._metrics = metrics
        self._first_time = True

    @property
    def state(self) -> ReportingState:
        if not self._runtime_config.current().enabled:
            return ReportingState.DISABLED
        if self._first_time:
            return ReportingState.WARMUP
        return ReportingState.ACTIVE

    def select_dispatcher(self, dest: str) -> IRecordDispatcher:
        """The log pipeline for "kafka", the redis queue for anything else."""
        if dest == DEST_KAFKA:
            return self._dispatchers[DEST_KAFKA]
        return self._dispatchers[DEST_REDIS]

    async def tick(self) -> TickReport:
        """Run one reporting cycle."""
        config = self._runtime_config.current()
        if not config.enabled:
            return TickReport(state=ReportingState.DISABLED)
        if self._first_time:
            self._first_time = False
            self._metrics.record_tick("warmup")
            logger.debug("flow_stat_report_warmup_skipped")
            return TickReport(state=ReportingState.WARMUP)

        report_window = align_report_window(self._stats_source.current_time_slot_id())
        resource_stats = self._stats_source.get_resource_time_window_stats(
            None, report_window.start, report_window.end, WINDOW_SIZE_SECONDS
        )
        if not resource_stats:
            logger.info(f"{to_dp19(report_window.start)} - {to_dp19(report_window.end)} no flow stat data")
            self._metrics.record_tick("empty")
            return TickReport(state=ReportingState.ACTIVE, window=report_window)

        dispatcher = self.select_dispatcher(config.dest)
        trace = _trace_logger.isEnabledFor(logging.DEBUG)
        records = 0
        failed = 0
        for resource_stat in resource_stats:
            try:
                classified = self._classifier.classify(resource_stat.resource_id)
                for window in resource_stat.windows:
                    self._dispatch_window(classified, window, dispatcher, config.queue, trace)
                    records += 1
            except Exception as e:
                failed += 1
                self._metrics.record_resource_failure(resource_stat.resource_id)
                logger.error(
                    "flow_stat_resource_report_failed",
                    resource=resource_stat.resource_id,
                    error=str(e),
                    exc_info=True,
                )

        self._metrics.record_tick("reported")
        return TickReport(
            state=ReportingState.ACTIVE,
            window=report_window,
            resources=len(resource_stats),
            records=records,
            failed_resources=failed,
        )

    def _dispatch_window(
        self,
        classified: ClassifiedResource,
        window: TimeWindowStat,
        dispatcher: IRecordDispatcher,
        queue: str,
        trace: bool,
    ) -> None:
        record = self._record_builder.build(classified, window)
        message = record.to_message()
        dispatcher.dispatch(record, message, queue)
        self._metrics.record_dispatch(dispatcher.dest)
        if trace:
            logger.debug(f"report {to_dp19(record.start)} win10: {message}")
