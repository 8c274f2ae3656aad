from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from flowstat.core.config.settings import settings
from flowstat.core.logging import logger
from flowstat.infrastructure.dependency_injection.reporter_dependencies import (
    ReporterComponents,
    get_reporter,
)

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_redis_health(request: Request) -> Dict[str, Any]:
    """Check Redis connection health."""
    redis_client = getattr(request.app.state, "redis", None)
    if redis_client is None:
        return {"status": "unavailable"}
    try:
        await redis_client.ping()
        return {"status": "healthy"}
    except Exception as e:
        logger.error("redis_health_check_failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}


def check_reporter_health(reporter: Optional[ReporterComponents]) -> Dict[str, Any]:
    if reporter is None:
        return {"status": "stopped"}
    return {"status": "running", "state": reporter.service.state.value}


@router.get("/", response_model=HealthResponse)
async def health_check(
    request: Request, reporter: Optional[ReporterComponents] = Depends(get_reporter)
):
    """
    Health check reporting Redis connectivity and the reporting job state.
    """
    redis_health = await check_redis_health(request)
    reporter_health = check_reporter_health(reporter)

    services_healthy = reporter_health["status"] == "running"
    if settings.APP_ENV != "test":
        services_healthy = services_healthy and redis_health["status"] == "healthy"

    return HealthResponse(
        status="ok" if services_healthy else "degraded",
        env=settings.APP_ENV,
        services={"redis": redis_health, "reporter": reporter_health},
        timestamp=datetime.now(timezone.utc),
    )
