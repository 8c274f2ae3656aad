"""Main application entry point for the FastAPI application.

Run with ``uvicorn flowstat.main:app``.
"""

from flowstat.core.application import create_application
from flowstat.core.initialization import initialize_application

initialize_application()

app = create_application()
