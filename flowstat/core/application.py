"""Application factory for creating and configuring the FastAPI application.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from flowstat.adapters.api.v1 import api_router
from flowstat.core.config.settings import settings
from flowstat.core.handlers import register_exception_handlers
from flowstat.core.lifecycle import create_lifespan_manager


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Periodic flow statistics reporter.",
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    return app
