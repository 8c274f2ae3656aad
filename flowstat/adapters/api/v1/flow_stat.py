"""Flow statistics report inspection and runtime configuration endpoints.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from redis.exceptions import RedisError

from flowstat.core.logging import logger
from flowstat.infrastructure.dependency_injection.reporter_dependencies import (
    ReporterComponents,
    get_reporter,
)

router = APIRouter()


class FlowStatConfigUpdate(BaseModel):
    enabled: Optional[bool] = Field(default=None, description="Turns reporting on or off")
    dest: Optional[str] = Field(default=None, description="'kafka' or 'redis'")
    queue: Optional[str] = Field(default=None, description="Queue, channel or topic name")


def _require_reporter(reporter: Optional[ReporterComponents]) -> ReporterComponents:
    if reporter is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Reporter is not running"
        )
    return reporter


@router.get("/")
async def get_flow_stat_status(reporter: Optional[ReporterComponents] = Depends(get_reporter)):
    """Current state, configuration snapshot and in-flight publishes."""
    reporter = _require_reporter(reporter)
    return {
        "state": reporter.service.state.value,
        "server_ip": reporter.server_ip,
        "config": asdict(reporter.runtime_config.current()),
        "pending_publishes": reporter.queue_dispatcher.pending,
    }


@router.put("/config")
async def update_flow_stat_config(
    update: FlowStatConfigUpdate,
    reporter: Optional[ReporterComponents] = Depends(get_reporter),
):
    """Apply a runtime configuration change and broadcast it to other instances."""
    reporter = _require_reporter(reporter)
    changes = update.model_dump(exclude_none=True)
    snapshot = reporter.runtime_config.update(**changes)
    if changes:
        try:
            await reporter.config_watcher.publish(**changes)
        except RedisError as e:
            logger.warning("flow_stat_config_broadcast_failed", error=str(e))
    return {"config": asdict(snapshot)}
