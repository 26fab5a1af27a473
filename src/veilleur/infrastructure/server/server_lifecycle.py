"""
HTTP server lifecycle controller.

Runs uvicorn on a background thread so the main thread stays free to
wait for termination signals, then drives a grace-bounded shutdown.

State machine:
    CREATED -> RUNNING -> SHUTTING_DOWN -> TERMINATED

A bind or serve failure moves RUNNING straight to TERMINATED and fires
the shutdown trigger with reason "server-failure".
"""

import threading
import time
from enum import Enum
from typing import Optional

import uvicorn

from veilleur.config.settings import parse_address
from veilleur.domain.exceptions import (
    ServerStartupError,
    ServerStateError,
    ShutdownError,
)
from veilleur.infrastructure.reporter import SystemReporter
from veilleur.infrastructure.server.timeout_middleware import TimeoutMiddleware
from veilleur.infrastructure.shutdown import ShutdownManager

STARTUP_TIMEOUT = 10.0
STARTUP_POLL_INTERVAL = 0.05

# Time allowed on top of the grace period for uvicorn to cancel
# remaining requests and return
SHUTDOWN_JOIN_MARGIN = 5.0

SERVER_FAILURE_REASON = "server-failure"


class ServerState(Enum):
    """Server lifecycle state."""

    CREATED = "created"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class ServerLifecycle:
    """
    Owns the uvicorn server and its thread.

    Cross-thread operations are limited to start() and shutdown(); the
    serving thread reports failures only through the shutdown trigger.

    Attributes:
        state: Current lifecycle state
        address: Bind address (set by start)
        failure: Fatal serve error, if the server thread failed
    """

    def __init__(
        self,
        reporter: SystemReporter,
        shutdown_manager: Optional[ShutdownManager] = None,
    ):
        """
        Initialize lifecycle controller.

        Args:
            reporter: System reporter
            shutdown_manager: Trigger fired when serving fails
        """
        self.reporter = reporter
        self.shutdown_manager = shutdown_manager

        self.state = ServerState.CREATED
        self.address: Optional[str] = None
        self.failure: Optional[ServerStartupError] = None

        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._stopping = threading.Event()

    def start(
        self,
        address: str,
        app,
        read_timeout: float,
        write_timeout: float,
        idle_timeout: float,
    ) -> None:
        """
        Start serving app on address in a background thread.

        Returns once the server is listening.

        Args:
            address: Bind address ("host:port")
            app: ASGI application dispatching requests
            read_timeout: Seconds allowed to read request body
            write_timeout: Seconds allowed per response write
            idle_timeout: Seconds an idle keep-alive connection stays open

        Raises:
            ServerStateError: If server was already started
            ServerStartupError: If server fails to bind or start
        """
        with self._lock:
            if self.state != ServerState.CREATED:
                raise ServerStateError("start", self.state.value)

            host, port = parse_address(address)
            config = uvicorn.Config(
                TimeoutMiddleware(app, read_timeout, write_timeout),
                host=host,
                port=port,
                timeout_keep_alive=idle_timeout,
                log_config=None,
            )

            self.address = address
            self._server = uvicorn.Server(config)
            self._thread = threading.Thread(
                target=self._serve,
                daemon=True,
                name="HttpServer",
            )
            self.state = ServerState.RUNNING
            self._thread.start()

        self._wait_until_started()

    def _serve(self) -> None:
        """Server thread body."""
        try:
            self._server.run()
        except SystemExit:
            # uvicorn logs the OSError itself, then exits
            self._fail(OSError(f"could not bind {self.address}"))
            return
        except Exception as e:
            self._fail(e)
            return

        if not self._stopping.is_set():
            self._fail(RuntimeError("server stopped without shutdown request"))

    def _fail(self, cause: BaseException) -> None:
        """Record fatal serve error and fire the shutdown trigger."""
        with self._lock:
            self.failure = ServerStartupError(self.address, cause)
            self.state = ServerState.TERMINATED

        if self.shutdown_manager is not None:
            self.shutdown_manager.trigger(SERVER_FAILURE_REASON)

    def _wait_until_started(self) -> None:
        """
        Block until uvicorn is listening.

        Raises:
            ServerStartupError: If server thread failed or did not start in time
        """
        deadline = time.monotonic() + STARTUP_TIMEOUT

        while not self._server.started:
            if self.failure is not None or not self._thread.is_alive():
                break
            if time.monotonic() >= deadline:
                self._stopping.set()
                self._server.should_exit = True
                self._fail(
                    TimeoutError(f"server did not start within {STARTUP_TIMEOUT}s")
                )
                break
            time.sleep(STARTUP_POLL_INTERVAL)

        if self._server.started and self.failure is None:
            self.reporter.debug(
                f"Server thread listening on {self.address}", context="HttpServer"
            )
            return

        # Thread may still be finishing; give it a moment to record the cause
        self._thread.join(timeout=STARTUP_POLL_INTERVAL * 10)
        if self.failure is None:
            self._fail(RuntimeError("server thread exited during startup"))
        raise self.failure

    def shutdown(self, grace_period: float) -> None:
        """
        Stop accepting connections and drain in-flight requests.

        Waits up to grace_period seconds for in-flight requests, then
        cancels them and closes their connections. Calling shutdown on an
        already stopped server is a no-op.

        Args:
            grace_period: Seconds to wait for in-flight requests

        Raises:
            ServerStateError: If server was never started
            ShutdownError: If server does not stop within
                grace_period + SHUTDOWN_JOIN_MARGIN
        """
        with self._lock:
            if self.state == ServerState.CREATED:
                raise ServerStateError("shutdown", self.state.value)
            if self.state != ServerState.RUNNING:
                return
            self.state = ServerState.SHUTTING_DOWN

        self.reporter.debug(
            f"Stopping server (grace period: {grace_period}s)", context="HttpServer"
        )

        self._stopping.set()
        self._server.config.timeout_graceful_shutdown = self._drain_timeout(
            grace_period
        )
        self._server.should_exit = True

        self._thread.join(timeout=grace_period + SHUTDOWN_JOIN_MARGIN)

        with self._lock:
            self.state = ServerState.TERMINATED

        if self._thread.is_alive():
            self._server.force_exit = True
            raise ShutdownError(
                f"Server did not stop within "
                f"{grace_period + SHUTDOWN_JOIN_MARGIN}s"
            )

        if self.failure is not None:
            raise ShutdownError(f"Server failed while stopping: {self.failure}")

    def _drain_timeout(self, grace_period: float) -> Optional[float]:
        """
        Timeout handed to uvicorn for draining in-flight requests.

        uvicorn's bounded wait always expires with a zero timeout and logs
        a cancellation error. With no grace and no request in flight the
        wait is left unbounded; it returns once idle connections close,
        and the thread join in shutdown() still bounds it.
        """
        if grace_period > 0 or self._server.server_state.tasks:
            return grace_period
        return None

    def is_running(self) -> bool:
        """Check if server is serving requests."""
        return self.state == ServerState.RUNNING

    def is_listening(self) -> bool:
        """Check if server socket is bound and accepting connections."""
        return (
            self.is_running()
            and self._server is not None
            and self._server.started
        )
