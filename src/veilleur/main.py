"""
Veilleur - Process template

Orchestrates startup and shutdown:
    1. Configure logging from settings
    2. Start HTTP server in background
    3. Block until SIGTERM/SIGINT (or a fatal server failure)
    4. Shut down within the grace period
    5. Return process exit code
"""

from enum import IntEnum
from typing import IO, Optional

from veilleur.config.settings import Settings
from veilleur.di import Container
from veilleur.domain.exceptions import ServerStartupError, ShutdownError
from veilleur.infrastructure.server.server_lifecycle import SERVER_FAILURE_REASON


class ExitCode(IntEnum):
    """Process exit codes."""

    OK = 0
    FATAL = 1


class VeilleurApp:
    """
    Veilleur application orchestrator.

    Thin coordination layer that connects the components built by the
    container and maps their outcomes to an exit code.
    """

    def __init__(self, settings: Settings, stream: Optional[IO[str]] = None):
        """
        Initialize Veilleur application.

        Args:
            settings: Application settings
            stream: Optional stream for stdout log output

        Raises:
            LoggingConfigurationError: If logging level is invalid
        """
        self.settings = settings
        self.container = Container(settings, stream=stream)

        # Initialize reporter FIRST
        self.reporter = self.container.reporter

        if settings.config_file:
            self.reporter.info(
                f"Using config file {settings.config_file}", context="Config"
            )

    def run(self) -> ExitCode:
        """
        Run server until termination.

        Must be called from the main thread (installs signal handlers).

        Returns:
            ExitCode.OK on clean shutdown, ExitCode.FATAL otherwise
        """
        shutdown_manager = self.container.shutdown_manager
        shutdown_manager.setup_signal_handlers()

        try:
            return self._run()
        finally:
            shutdown_manager.restore_signal_handlers()
            self.reporter.close()

    def _run(self) -> ExitCode:
        http = self.settings.http
        timeouts = http.timeouts
        lifecycle = self.container.server_lifecycle
        shutdown_manager = self.container.shutdown_manager

        self.reporter.info(f"Starting http server at {http.address}")

        try:
            lifecycle.start(
                http.address,
                self.container.app,
                read_timeout=timeouts.read,
                write_timeout=timeouts.write,
                idle_timeout=timeouts.idle,
            )
        except ServerStartupError as e:
            self.reporter.critical(str(e))
            return ExitCode.FATAL

        self.reporter.info(f"Server ready to serve request at {http.address}")

        # Server runs in the background; block until SIGINT/SIGTERM
        reason = shutdown_manager.wait_for_termination()

        if reason == SERVER_FAILURE_REASON and lifecycle.failure is not None:
            self.reporter.critical(str(lifecycle.failure))
            return ExitCode.FATAL

        self.reporter.info(f"Received {reason}, shutting down server...")
        self.reporter.debug(
            f"Shutdown triggered: {shutdown_manager.get_shutdown_info()}",
            context="Shutdown",
        )

        try:
            lifecycle.shutdown(timeouts.grace)
        except ShutdownError as e:
            self.reporter.critical(f"Server failed to shutdown gracefully: {e}")
            return ExitCode.FATAL

        self.reporter.info("Server stopped")
        return ExitCode.OK
