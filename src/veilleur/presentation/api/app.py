"""
FastAPI application factory.
"""

from fastapi import FastAPI

from veilleur import __version__
from veilleur.infrastructure.reporter import SystemReporter
from veilleur.presentation.api.routes import status_router


def create_app(reporter: SystemReporter) -> FastAPI:
    """
    Create FastAPI application.

    Only the status route is exposed; interactive docs are disabled.

    Args:
        reporter: System reporter used by request handlers

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Veilleur",
        description="Process template with health check",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.reporter = reporter

    app.include_router(status_router)

    return app
