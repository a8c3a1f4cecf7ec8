"""Logging options surface."""

from svckit.log.options import LogOptions

__all__ = ["LogOptions"]
