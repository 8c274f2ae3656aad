from __future__ import annotations

"""
Global exception handlers for the FastAPI application.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from flowstat.core.exceptions import ConfigurationError, FlowStatError

__all__ = [
    "configuration_error_handler",
    "flowstat_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Handles invalid configuration updates, returning 400."""
    logger.warning("configuration_error", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "code": exc.code},
    )


async def flowstat_error_handler(request: Request, exc: FlowStatError) -> JSONResponse:
    """Fallback for every other application error, returning 500."""
    logger.error("flowstat_error", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message, "code": exc.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(FlowStatError, flowstat_error_handler)
