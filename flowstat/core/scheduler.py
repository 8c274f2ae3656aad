"""Scheduling of the flow statistics report.

The report runs as a single APScheduler job on a cron trigger. The job is
limited to one running instance and coalesces missed runs, so ticks never
overlap.
"""

from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from flowstat.core.exceptions import ConfigurationError
from flowstat.core.logging import logger

REPORT_JOB_ID = "flow_stat_report"

_CRON_FIELDS = ("second", "minute", "hour", "day", "month", "day_of_week")


def parse_cron(expression: str, timezone=None) -> CronTrigger:
    """Build a trigger from a cron expression.

    Accepts six fields with seconds first (``*/10 * * * * ?``), where ``?``
    means "any", or a standard five-field crontab line.

    Raises:
        ConfigurationError: If the expression has the wrong number of fields
            or a field APScheduler rejects.
    """
    parts = expression.split()
    try:
        if len(parts) == 5:
            return CronTrigger.from_crontab(expression, timezone=timezone)
        if len(parts) == 6:
            values = ["*" if part == "?" else part for part in parts]
            return CronTrigger(timezone=timezone, **dict(zip(_CRON_FIELDS, values)))
    except ValueError as e:
        raise ConfigurationError(f"Invalid cron expression '{expression}': {e}",
                                 code="invalid_cron") from e
    raise ConfigurationError(
        f"Cron expression '{expression}' must have 5 or 6 fields", code="invalid_cron"
    )


def create_report_scheduler(
    tick: Callable[[], Awaitable[object]], cron: str
) -> AsyncIOScheduler:
    """Create (without starting) the scheduler running ``tick``.

    Args:
        tick: Coroutine function executed on every trigger
        cron: Cron expression, see `parse_cron`
    """

    async def run_tick() -> None:
        try:
            await tick()
        except Exception as e:
            logger.error("flow_stat_report_tick_failed", error=str(e), exc_info=True)

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        run_tick,
        parse_cron(cron),
        id=REPORT_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
