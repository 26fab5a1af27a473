"""
Dependency Injection container for Veilleur.

Manages lifecycle and dependencies of all application components.
"""

from typing import IO, Optional

from fastapi import FastAPI

from veilleur.config.settings import Settings
from veilleur.infrastructure.reporter import SystemReporter
from veilleur.infrastructure.server import ServerLifecycle
from veilleur.infrastructure.shutdown import ShutdownManager
from veilleur.presentation.api import create_app


class Container:
    """
    Dependency Injection container.

    Creates each component once, from one Settings instance.
    """

    def __init__(self, settings: Settings, stream: Optional[IO[str]] = None):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            stream: Optional stream for stdout log output
        """
        self.settings = settings
        self._stream = stream

        self._reporter: Optional[SystemReporter] = None
        self._shutdown_manager: Optional[ShutdownManager] = None
        self._server_lifecycle: Optional[ServerLifecycle] = None
        self._app: Optional[FastAPI] = None

    @property
    def reporter(self) -> SystemReporter:
        """
        Get SystemReporter singleton.

        Raises:
            LoggingConfigurationError: If logging level is invalid
        """
        if self._reporter is None:
            self._reporter = SystemReporter(
                self.settings.logging,
                stream=self._stream,
            )
        return self._reporter

    @property
    def shutdown_manager(self) -> ShutdownManager:
        """Get ShutdownManager singleton."""
        if self._shutdown_manager is None:
            self._shutdown_manager = ShutdownManager()
        return self._shutdown_manager

    @property
    def server_lifecycle(self) -> ServerLifecycle:
        """Get ServerLifecycle singleton."""
        if self._server_lifecycle is None:
            self._server_lifecycle = ServerLifecycle(
                reporter=self.reporter,
                shutdown_manager=self.shutdown_manager,
            )
        return self._server_lifecycle

    @property
    def app(self) -> FastAPI:
        """Get FastAPI application singleton."""
        if self._app is None:
            self._app = create_app(self.reporter)
        return self._app
