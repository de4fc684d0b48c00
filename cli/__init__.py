"""CLI package for the x-bookmarks monitor

Provides the `bookmarks` command: check for new bookmarks (default),
--show stored alerts, or --clear them.
"""

from cli.main import main

__all__ = [
    "main",
]
