"""Shutdown manager implementations."""

from svckit.shutdown.managers.posix_signal import NAME, ManagerState, PosixSignalManager

__all__ = ["NAME", "ManagerState", "PosixSignalManager"]
