"""
HTTP server for Veilleur.
"""

from veilleur.infrastructure.server.server_lifecycle import (
    SHUTDOWN_JOIN_MARGIN,
    ServerLifecycle,
    ServerState,
)
from veilleur.infrastructure.server.timeout_middleware import (
    RequestReadTimeout,
    ResponseWriteTimeout,
    TimeoutMiddleware,
)

__all__ = [
    "RequestReadTimeout",
    "ResponseWriteTimeout",
    "SHUTDOWN_JOIN_MARGIN",
    "ServerLifecycle",
    "ServerState",
    "TimeoutMiddleware",
]
