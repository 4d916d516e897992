"""Lifecycle of the long-running ``signal-cli receive`` child process.

States::

    STARTING --start()--> RUNNING --signal--> SHUTTING_DOWN --> STOPPED
                             |                                    ^
                             +------- stream closed, wait() ------+

Shutdown runs on a background thread so it never blocks the ingestion
loop.  It interrupts the child, waits a grace period, then kills it.
The dying child closes its stdout, which normally ends the ingestion
loop.  If the loop is still stuck (e.g. in a hung ``signal-cli send``)
after another grace period, the process exits from the shutdown thread.
"""

from __future__ import annotations

import enum
import logging
import os
import signal
import subprocess
import threading
from collections.abc import Sequence
from types import FrameType

logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_SECONDS = 5.0


class State(enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class Supervisor:
    """Owns one child process and its shutdown sequence."""

    def __init__(
        self,
        argv: Sequence[str],
        *,
        grace_period: float = SHUTDOWN_GRACE_SECONDS,
    ) -> None:
        self._argv = list(argv)
        self._grace_period = grace_period
        self._state = State.STARTING
        self._lock = threading.RLock()
        self._proc: subprocess.Popen[str] | None = None
        self._shutdown_thread: threading.Thread | None = None
        self._finished = threading.Event()

    @property
    def state(self) -> State:
        return self._state

    @property
    def process(self) -> subprocess.Popen[str] | None:
        return self._proc

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_thread is not None

    def start(self) -> subprocess.Popen[str]:
        """Launch the child with a line-buffered text stdout pipe.

        Raises :class:`SystemExit` if the executable cannot be started.
        """
        if self._state is not State.STARTING:
            msg = f"Cannot start from state {self._state.value}"
            raise RuntimeError(msg)
        try:
            self._proc = subprocess.Popen(  # noqa: S603
                self._argv,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise SystemExit(f"Failed to start {self._argv[0]}: {exc}") from exc
        self._state = State.RUNNING
        logger.info("Started %s (pid %d)", self._argv[0], self._proc.pid)
        return self._proc

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to :meth:`request_shutdown`.

        Must be called from the main thread.
        """
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self._handle_signal)

    def _handle_signal(self, signum: int, _frame: FrameType | None) -> None:
        self.request_shutdown(signum)

    def request_shutdown(self, signum: int | None = None) -> None:
        """Begin shutdown on a background thread.  Repeat calls are no-ops."""
        with self._lock:
            if self._shutdown_thread is not None:
                return
            if signum is not None:
                logger.info(
                    "Received %s, shutting down", signal.Signals(signum).name
                )
            self._state = State.SHUTTING_DOWN
            self._shutdown_thread = threading.Thread(
                target=self._shutdown_then_exit, name="shutdown", daemon=True
            )
            self._shutdown_thread.start()

    def shutdown(self) -> None:
        """Interrupt the child, wait the grace period, then force-kill."""
        self._state = State.SHUTTING_DOWN
        proc = self._proc
        if proc is not None and proc.poll() is None:
            proc.send_signal(signal.SIGINT)
            try:
                proc.wait(timeout=self._grace_period)
            except subprocess.TimeoutExpired:
                logger.warning(
                    "Child still running after %.1fs, killing", self._grace_period
                )
                proc.kill()
                proc.wait()
        self._state = State.STOPPED
        logger.info("Bot stopped")

    def _shutdown_then_exit(self) -> None:
        """Stop the child, then end the process if the main loop is stuck."""
        self.shutdown()
        if self._finished.wait(self._grace_period):
            return
        logger.warning(
            "Message loop still busy after %.1fs, exiting", self._grace_period
        )
        logging.shutdown()
        os._exit(0)

    def finish(self) -> None:
        """Mark the main loop as done so a pending shutdown need not force exit."""
        self._finished.set()

    def join_shutdown(self) -> None:
        """Block until a requested shutdown has finished."""
        if self._shutdown_thread is not None:
            self._shutdown_thread.join()

    def wait(self) -> int:
        """Reap the child after its stream closed and return its exit code."""
        if self._proc is None:
            self._state = State.STOPPED
            return 0
        returncode = self._proc.wait()
        self._state = State.STOPPED
        return returncode
