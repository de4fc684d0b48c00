"""Shared utilities package for x-bookmarks"""

from .debug_console import DebugCapturingConsole, configure_logging

__all__ = [
    "DebugCapturingConsole",
    "configure_logging",
]
