"""
Status API routes.

Liveness probe answering any method on /status/health.
"""

from fastapi import APIRouter, Depends, Request, Response

from veilleur.infrastructure.reporter import SystemReporter
from veilleur.presentation.schemas import StatusResponse

HEALTH_PATH = "/status/health"
HEALTH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter(tags=["status"])


def get_reporter(request: Request) -> SystemReporter:
    """Dependency for system reporter."""
    return request.app.state.reporter


def render_status() -> str:
    """Render health payload as JSON."""
    return StatusResponse().model_dump_json(by_alias=True)


@router.api_route(HEALTH_PATH, methods=HEALTH_METHODS)
def status_handler(reporter: SystemReporter = Depends(get_reporter)) -> Response:
    """
    Health check endpoint.

    Returns:
        200 with {"Status":"OK"}
    """
    try:
        body = render_status()
    except ValueError as e:
        # PydanticSerializationError is a ValueError
        reporter.error(f"Error on rendering json: {e}", context="StatusHandler")
        body = ""

    return Response(content=body, media_type="application/json")
