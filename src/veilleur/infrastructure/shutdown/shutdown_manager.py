"""
Shutdown trigger.

Handles:
- Signal registration (SIGTERM, SIGINT)
- One-shot termination trigger
- Blocking wait on the main thread
"""

import signal
import threading
import time
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

TERMINATION_SIGNALS: Tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)

# Upper bound on the delay between a signal and the waiter noticing it
WAIT_POLL_INTERVAL = 0.1


class ShutdownManager:
    """
    One-shot termination trigger.

    Fired by SIGTERM/SIGINT, or by the server thread when serving fails.
    Fires at most once: the first reason wins and later triggers are
    ignored. The main thread blocks in wait_for_termination() until it
    fires.

    Signal handlers only record the signal; the trigger itself is fired
    by the next call on the manager from regular code (normally the
    waiting main thread).

    Attributes:
        reason: What fired the trigger (signal name, "server-failure", ...)
        triggered_at: Timestamp when the trigger fired
    """

    def __init__(self, signals: Tuple[signal.Signals, ...] = TERMINATION_SIGNALS):
        """
        Initialize shutdown manager.

        Args:
            signals: Signals that fire the trigger
        """
        self.signals = signals

        self._reason: Optional[str] = None
        self._triggered_at: Optional[datetime] = None
        self._signal_received: Optional[Tuple[str, datetime]] = None

        self._event = threading.Event()
        self._lock = threading.RLock()
        self._original_handlers: Dict[signal.Signals, object] = {}

    @property
    def reason(self) -> Optional[str]:
        self._collect_signal()
        return self._reason

    @property
    def triggered_at(self) -> Optional[datetime]:
        self._collect_signal()
        return self._triggered_at

    def setup_signal_handlers(self) -> None:
        """
        Setup signal handlers that fire the trigger.

        Must be called from the main thread. Preserves original handlers
        for restoration.
        """
        for sig in self.signals:
            self._original_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def _handle_signal(self, signum: int, frame) -> None:
        """
        Record termination signal.

        Takes no locks: the interrupted main thread may be holding the
        event's internal lock inside wait().

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        if self._signal_received is None:
            self._signal_received = (
                signal.Signals(signum).name,
                datetime.now(timezone.utc),
            )

    def _collect_signal(self) -> None:
        """Fire the trigger for a signal recorded by the handler."""
        received = self._signal_received
        if received is not None and not self._event.is_set():
            self._fire(*received)

    def trigger(self, reason: str = "manual") -> bool:
        """
        Fire the trigger.

        Safe to call from any thread, but not from a signal handler.

        Args:
            reason: Reason for termination

        Returns:
            True if this call fired the trigger, False if already fired
        """
        self._collect_signal()
        return self._fire(reason, datetime.now(timezone.utc))

    def _fire(self, reason: str, at: datetime) -> bool:
        with self._lock:
            if self._event.is_set():
                return False

            self._reason = reason
            self._triggered_at = at
            self._event.set()
            return True

    def is_triggered(self) -> bool:
        """Check if the trigger has fired."""
        self._collect_signal()
        return self._event.is_set()

    def wait_for_termination(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Block until the trigger fires.

        Wakes at least every WAIT_POLL_INTERVAL seconds to pick up
        signals recorded by the handler.

        Args:
            timeout: Optional maximum seconds to wait

        Returns:
            Trigger reason, or None if timeout elapsed first
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            self._collect_signal()
            if self._event.is_set():
                return self._reason

            wait = WAIT_POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                wait = min(wait, remaining)

            self._event.wait(wait)

    def get_shutdown_info(self) -> dict:
        """
        Get shutdown status information.

        Returns:
            Dictionary with trigger details
        """
        self._collect_signal()
        return {
            "triggered": self._event.is_set(),
            "reason": self._reason,
            "triggered_at": (
                self._triggered_at.isoformat() if self._triggered_at else None
            ),
        }
