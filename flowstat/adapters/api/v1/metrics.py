"""Metrics endpoint for exposing reporter metrics.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from flowstat.core.metrics import metrics_collector

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_metrics():
    """Get reporter metrics.

    Returns tick outcomes, records dispatched and publish failures per
    destination, and resources whose processing failed.
    """
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "metrics": metrics_collector.get_metrics(),
    }
