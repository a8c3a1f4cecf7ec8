"""Graceful shutdown coordination.

A GracefulShutdown holds shutdown managers, which detect shutdown requests
(signals, orchestrator hooks, ...), and shutdown callbacks, which release the
application's resources. When a manager requests shutdown every callback runs
concurrently on its own thread; errors are reported to the error handler and
never propagated.

Example::

    gs = GracefulShutdown()
    gs.add_shutdown_manager(PosixSignalManager())
    gs.add_shutdown_callback(lambda manager_name: db.close())
    gs.set_error_handler(lambda err: logger.error("shutdown_error", error=str(err)))
    gs.start()
"""

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@runtime_checkable
class ShutdownCallback(Protocol):
    """Work to run when shutdown is requested."""

    def on_shutdown(self, manager_name: str) -> None:
        """Called with the name of the manager that requested shutdown."""
        ...


@runtime_checkable
class ErrorHandler(Protocol):
    """Receives errors raised by managers and callbacks."""

    def on_error(self, err: BaseException) -> None: ...


class GSInterface(Protocol):
    """Coordinator operations available to shutdown managers."""

    def start_shutdown(self, manager: "ShutdownManager") -> None: ...

    def report_error(self, err: BaseException | None) -> None: ...

    def add_shutdown_callback(self, callback: ShutdownCallback | Callable[[str], None]) -> None: ...


@runtime_checkable
class ShutdownManager(Protocol):
    """A source of shutdown requests."""

    def get_name(self) -> str:
        """Stable name passed to every callback."""
        ...

    def start(self, gs: GSInterface) -> None:
        """Start listening for shutdown requests; must return promptly."""
        ...

    def shutdown_start(self) -> None:
        """Called before any callback runs."""
        ...

    def shutdown_finish(self) -> None:
        """Called once every callback has returned."""
        ...


class ShutdownFunc:
    """Adapter to use a plain function as a ShutdownCallback."""

    def __init__(self, func: Callable[[str], None]) -> None:
        self._func = func

    def on_shutdown(self, manager_name: str) -> None:
        self._func(manager_name)

    def __repr__(self) -> str:
        return f"ShutdownFunc({getattr(self._func, '__name__', self._func)!r})"


class ErrorFunc:
    """Adapter to use a plain function as an ErrorHandler."""

    def __init__(self, func: Callable[[BaseException], None]) -> None:
        self._func = func

    def on_error(self, err: BaseException) -> None:
        self._func(err)


class GracefulShutdown:
    """Owns shutdown managers and callbacks and runs the shutdown sequence.

    Managers and callbacks should be registered before ``start``; adding them
    afterwards is not synchronized with a shutdown in progress.
    """

    def __init__(self) -> None:
        self._callbacks: list[ShutdownCallback] = []
        self._managers: list[ShutdownManager] = []
        self._error_handler: ErrorHandler | None = None
        self._lock = threading.Lock()
        self._shutting_down = False
        self._shutdown_event = threading.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def managers(self) -> list[ShutdownManager]:
        return list(self._managers)

    @property
    def callbacks(self) -> list[ShutdownCallback]:
        return list(self._callbacks)

    def add_shutdown_manager(self, manager: ShutdownManager) -> None:
        """Add a manager that will listen for shutdown requests."""
        self._managers.append(manager)

    def add_shutdown_callback(self, callback: ShutdownCallback | Callable[[str], None]) -> None:
        """Add a callback to run on shutdown.

        Plain functions taking the manager name are accepted and wrapped in
        ShutdownFunc.
        """
        if not isinstance(callback, ShutdownCallback):
            callback = ShutdownFunc(callback)
        self._callbacks.append(callback)

    def set_error_handler(self, handler: ErrorHandler | Callable[[BaseException], None] | None) -> None:
        """Set the handler for errors raised by managers and callbacks."""
        if handler is not None and not isinstance(handler, ErrorHandler):
            handler = ErrorFunc(handler)
        self._error_handler = handler

    def report_error(self, err: BaseException | None) -> None:
        """Pass an error to the error handler, if both are set."""
        if err is not None and self._error_handler is not None:
            self._error_handler.on_error(err)

    def start(self) -> None:
        """Start every manager in registration order.

        The first manager that raises stops the loop and the exception
        propagates; managers already started keep running.
        """
        for manager in self._managers:
            try:
                manager.start(self)
            except Exception as e:
                logger.error(
                    "shutdown_manager_start_failed",
                    manager=manager.get_name(),
                    error=str(e),
                )
                raise
            logger.debug("shutdown_manager_started", manager=manager.get_name())

    def start_shutdown(self, manager: ShutdownManager) -> None:
        """Run the shutdown sequence on behalf of ``manager``.

        Calls ``manager.shutdown_start``, then every callback concurrently,
        waits for all of them and finally calls ``manager.shutdown_finish``.
        Only the first call runs the sequence; later calls return at once.
        """
        with self._lock:
            if self._shutting_down:
                logger.warning("shutdown_already_in_progress", manager=manager.get_name())
                return
            self._shutting_down = True

        name = manager.get_name()
        logger.info("shutdown_initiated", manager=name, callbacks=len(self._callbacks))

        self._call_manager_hook(manager.shutdown_start, name, "shutdown_start")

        callbacks = list(self._callbacks)
        if callbacks:
            with ThreadPoolExecutor(
                max_workers=len(callbacks), thread_name_prefix="shutdown-callback"
            ) as executor:
                futures = [executor.submit(self._run_callback, cb, name) for cb in callbacks]
                wait(futures)

        self._shutdown_event.set()
        logger.info("shutdown_complete", manager=name)

        self._call_manager_hook(manager.shutdown_finish, name, "shutdown_finish")

    def wait_for_shutdown(self, timeout: float | None = None) -> bool:
        """Block until every callback has completed.

        Returns False if ``timeout`` elapsed first.
        """
        return self._shutdown_event.wait(timeout)

    def _run_callback(self, callback: ShutdownCallback, manager_name: str) -> None:
        try:
            callback.on_shutdown(manager_name)
        except Exception as e:
            logger.error(
                "shutdown_callback_failed",
                callback=repr(callback),
                manager=manager_name,
                error=str(e),
            )
            self._report_shutdown_error(e)

    def _call_manager_hook(self, hook: Callable[[], None], manager_name: str, phase: str) -> None:
        try:
            hook()
        except Exception as e:
            logger.error("shutdown_manager_hook_failed", manager=manager_name, phase=phase, error=str(e))
            self._report_shutdown_error(e)

    def _report_shutdown_error(self, err: BaseException) -> None:
        # A failing handler must not stop the shutdown sequence
        try:
            self.report_error(err)
        except Exception as e:
            logger.error("error_handler_failed", error=str(e), reported_error=str(err))


# Global singleton
graceful_shutdown = GracefulShutdown()


def get_graceful_shutdown() -> GracefulShutdown:
    """Get the global graceful shutdown coordinator."""
    return graceful_shutdown
