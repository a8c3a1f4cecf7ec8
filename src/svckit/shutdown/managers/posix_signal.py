"""Shutdown manager triggered by POSIX signals."""

import enum
import os
import queue
import signal
import sys
import threading
from collections.abc import Callable, Iterable
from typing import Any

import structlog

from svckit.config import Settings, get_settings
from svckit.shutdown.coordinator import GSInterface

logger = structlog.get_logger(__name__)

NAME = "PosixSignalManager"

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ManagerState(enum.Enum):
    IDLE = "idle"
    LISTENING = "listening"
    TRIGGERED = "triggered"


class PosixSignalManager:
    """Request shutdown when one of the configured signals is received.

    Handlers are installed by ``start``, which must therefore run in the main
    thread. The first signal starts the shutdown on a background thread and
    the process exits with status 0 once all callbacks have returned.
    """

    def __init__(self, *signals: signal.Signals, exit_func: Callable[[int], Any] = os._exit) -> None:
        self.signals = tuple(signals) or DEFAULT_SIGNALS
        self._exit = exit_func
        self._received: queue.Queue[signal.Signals] = queue.Queue(maxsize=1)
        self._state = ManagerState.IDLE
        self._thread: threading.Thread | None = None

    @classmethod
    def from_names(cls, names: Iterable[str], **kwargs) -> "PosixSignalManager":
        """Build a manager from signal names such as ``"SIGTERM"``."""
        return cls(*(signal.Signals[name.upper()] for name in names), **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> "PosixSignalManager":
        """Build a manager for the configured ``shutdown_signals``."""
        if settings is None:
            settings = get_settings()
        return cls(*settings.shutdown_signals_list, **kwargs)

    @property
    def state(self) -> ManagerState:
        return self._state

    def get_name(self) -> str:
        return NAME

    def start(self, gs: GSInterface) -> None:
        """Install signal handlers and wait for a signal in the background."""
        for sig in self.signals:
            signal.signal(sig, self._handle_signal)

        self._thread = threading.Thread(
            target=self._wait_for_signal,
            args=(gs,),
            name="posix-signal-manager",
            daemon=True,
        )
        self._state = ManagerState.LISTENING
        self._thread.start()
        logger.info("signal_listener_started", signals=[s.name for s in self.signals])

    def shutdown_start(self) -> None:
        pass

    def shutdown_finish(self) -> None:
        """Exit the process with status 0."""
        logger.info("process_exiting", exit_code=0)
        sys.stdout.flush()
        sys.stderr.flush()
        self._exit(0)

    def _handle_signal(self, signum: int, frame: Any) -> None:
        try:
            self._received.put_nowait(signal.Signals(signum))
        except queue.Full:
            # Only the first signal triggers shutdown
            pass

    def _wait_for_signal(self, gs: GSInterface) -> None:
        sig = self._received.get()
        self._state = ManagerState.TRIGGERED
        logger.info("signal_received", signal=sig.name)
        gs.start_shutdown(self)
