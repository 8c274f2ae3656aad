"""
Flow statistics reporting settings.

These are the startup values of the reporting job. FLOW_CONTROL,
FLOW_STAT_SCHED_DEST and FLOW_STAT_SCHED_QUEUE seed the runtime snapshot and
can later be refreshed without a restart (see ``runtime.py``).
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEST_REDIS = "redis"
DEST_KAFKA = "kafka"

DEFAULT_QUEUE = "fizz_resource_access_stat"
DEFAULT_CRON = "*/10 * * * * ?"


class FlowStatSettings(BaseSettings):
    """
    Defines settings for the periodic flow statistics report.

    Performance Note:
        - FLOW_STAT_SCHED_CRON should fire every 10 seconds, matching the window
          size of the statistics engine. Slower cadences skip windows.
    """
    FLOW_CONTROL: bool = False
    FLOW_STAT_SCHED_DEST: str = DEST_REDIS
    FLOW_STAT_SCHED_QUEUE: str = Field(default=DEFAULT_QUEUE, min_length=1)
    FLOW_STAT_SCHED_CRON: str = DEFAULT_CRON

    # Channel carrying runtime updates of the three refreshable values above
    FLOW_STAT_CONFIG_CHANNEL: str = "flowstat_config_updates"

    RATE_LIMIT_CONFIG_HASH: str = "fizz_rate_limit"
    RATE_LIMIT_CONFIG_CHANNEL: str = "fizz_rate_limit_channel"

    @field_validator("FLOW_STAT_SCHED_DEST", mode="before")
    @classmethod
    def normalize_dest(cls, value: str) -> str:
        """Lower-cases the destination; anything but kafka routes to the redis queue."""
        if value is None:
            return DEST_REDIS
        return str(value).strip().lower() or DEST_REDIS
