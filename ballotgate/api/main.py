"""FastAPI application entry point for ballotgate."""

import os

from fastapi import FastAPI

from ballotgate import __version__
from ballotgate.api.middleware.logging_middleware import LoggingMiddleware
from ballotgate.api.routes.ballot import router as ballot_router
from ballotgate.api.routes.health import router as health_router
from ballotgate.infrastructure.observability import configure_structlog


def create_app() -> FastAPI:
    """Build the ballot API application.

    Logging is configured from the ENVIRONMENT variable
    ("production" for JSON lines, anything else for console output).
    """
    configure_structlog(os.getenv("ENVIRONMENT", "production"))

    application = FastAPI(
        title="ballotgate API",
        description="Phase-gated voting workflow and tally engine",
        version=__version__,
    )
    application.add_middleware(LoggingMiddleware)
    application.include_router(health_router)
    application.include_router(ballot_router)
    return application


app = create_app()
