#!/usr/bin/env python3
"""
watchdog.py
-----------
Discussion watchdog that ends a rename run.

A background thread polls the discussion threads of a watched document
at a fixed interval. As soon as one thread has status ``normal`` the
run is considered satisfied and must stop; a failed poll is fatal and
stops the run as well. Neither case is retried.

The stop request is delivered through a shared :class:`Termination`
signal that the rename orchestrator checks between documents and while
pacing. A request already sent to the Document Service when the signal
fires still completes (bounded by the client timeout).

States:
    POLLING   -- polling at the configured interval
    SATISFIED -- a ``normal`` thread was observed (terminal)
    FAILED    -- a poll raised an error (terminal)
    STOPPED   -- the run finished first and the watchdog was shut down

Usage:
    from relink.wiki.watchdog import Termination, Watchdog

    termination = Termination()
    watchdog = Watchdog(service, "Project:Requests", termination)
    watchdog.start()
    ...
    watchdog.stop()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import threading
from enum import Enum
from typing import Optional

# --- Local imports ---
from relink.core.config import DEFAULT_POLL_INTERVAL
from relink.core.logging_manager import RelinkLogger, safe_logger
from relink.service.client import DocumentService


class WatchState(Enum):
    POLLING = "polling"
    SATISFIED = "satisfied"
    FAILED = "failed"
    STOPPED = "stopped"


class Termination:
    """
    One-shot, thread-safe termination signal.

    The first call to :meth:`trigger` wins; later calls are ignored so the
    recorded state and reason always describe what actually stopped the run.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._state: Optional[WatchState] = None
        self._reason: Optional[str] = None

    def trigger(self, state: WatchState, reason: str) -> bool:
        """
        Request termination of the run.

        Args:
            state: Terminal watchdog state that caused the request
            reason: Human-readable reason, shown to the user

        Returns:
            True if this call set the signal, False if it was already set
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._state = state
            self._reason = reason
            self._event.set()
            return True

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block up to ``timeout`` seconds; True if termination was requested."""
        return self._event.wait(timeout)

    @property
    def state(self) -> Optional[WatchState]:
        with self._lock:
            return self._state

    @property
    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason


class Watchdog:
    """
    Polls a document's discussion status on a background thread.

    Attributes:
        service: Document Service used for the status lookup
        document: Watched document identifier
        termination: Signal set when the watchdog reaches a terminal state
        poll_interval: Seconds between polls
    """

    def __init__(
        self,
        service: DocumentService,
        document: str,
        termination: Termination,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[RelinkLogger] = None,
    ) -> None:
        self.service = service
        self.document = document
        self.termination = termination
        self.poll_interval = poll_interval
        self.logger = logger

        self._state = WatchState.POLLING
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> WatchState:
        with self._lock:
            return self._state

    def _set_state(self, state: WatchState) -> None:
        with self._lock:
            self._state = state

    def poll_once(self) -> bool:
        """
        Run a single status lookup.

        Returns:
            True if any thread of the watched document has status ``normal``

        Raises:
            DocumentServiceError: If the lookup fails
        """
        threads = self.service.discussions(self.document)
        safe_logger(self.logger).log_debug(
            "Discussion poll",
            {"document": self.document, "statuses": [t.status for t in threads]},
        )
        return any(thread.is_normal for thread in threads)

    def _run(self) -> None:
        log = safe_logger(self.logger)
        while not self._stop.is_set():
            try:
                satisfied = self.poll_once()
            except Exception as exc:
                if self._stop.is_set():
                    break
                self._set_state(WatchState.FAILED)
                log.log_error(exc, {"operation": "watchdog_poll", "document": self.document})
                self.termination.trigger(
                    WatchState.FAILED,
                    f"Error checking discussion on '{self.document}': {exc}",
                )
                return

            if self._stop.is_set():
                break

            if satisfied:
                self._set_state(WatchState.SATISFIED)
                log.log_operation("watchdog_satisfied", {"document": self.document})
                self.termination.trigger(
                    WatchState.SATISFIED,
                    f"Discussion on '{self.document}' is normal. Stopping.",
                )
                return

            if self._stop.wait(self.poll_interval):
                break

        with self._lock:
            if self._state is WatchState.POLLING:
                self._state = WatchState.STOPPED

    def start(self) -> None:
        """Start polling on a daemon thread (first poll is immediate)."""
        if self._thread is not None:
            raise RuntimeError("Watchdog already started")
        safe_logger(self.logger).log_info(
            "Watchdog started",
            {"document": self.document, "interval": self.poll_interval},
        )
        self._thread = threading.Thread(
            target=self._run, name="relink-watchdog", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop polling and wait for the thread to exit.

        Args:
            timeout: Maximum seconds to wait for the thread
        """
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
