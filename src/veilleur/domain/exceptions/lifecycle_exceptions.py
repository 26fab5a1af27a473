"""
Server lifecycle exceptions.
"""

from typing import Optional

from veilleur.domain.exceptions.base import VeilleurError


class ServerStartupError(VeilleurError):
    """Raised when HTTP server fails to bind or stops serving unexpectedly."""

    def __init__(self, address: str, cause: Optional[BaseException] = None):
        """
        Initialize ServerStartupError.

        Args:
            address: Bind address
            cause: Underlying error, if any
        """
        message = f"Fail to serve http at {address}"
        if cause is not None:
            message = f"{message}: {cause!r}"
        super().__init__(message)
        self.address = address
        self.cause = cause


class ServerStateError(VeilleurError):
    """Raised on an invalid lifecycle transition."""

    def __init__(self, operation: str, state: str):
        """
        Initialize ServerStateError.

        Args:
            operation: Attempted operation
            state: Current server state
        """
        super().__init__(f"Cannot {operation} server in state {state!r}")
        self.operation = operation
        self.state = state


class ShutdownError(VeilleurError):
    """Raised when server fails to shut down gracefully."""

    pass
