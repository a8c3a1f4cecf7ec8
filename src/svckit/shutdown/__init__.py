"""Graceful shutdown coordination."""

from svckit.shutdown.coordinator import (
    ErrorFunc,
    ErrorHandler,
    GracefulShutdown,
    GSInterface,
    ShutdownCallback,
    ShutdownFunc,
    ShutdownManager,
    get_graceful_shutdown,
    graceful_shutdown,
)

__all__ = [
    "ErrorFunc",
    "ErrorHandler",
    "GSInterface",
    "GracefulShutdown",
    "ShutdownCallback",
    "ShutdownFunc",
    "ShutdownManager",
    "get_graceful_shutdown",
    "graceful_shutdown",
]
