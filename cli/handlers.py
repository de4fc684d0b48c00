"""Command handlers for the bookmarks CLI"""

import logging

from rich.console import Console

from bookmarks import BookmarkMonitor, XApiClient
from config import MonitorConfig
from cli.display import show_alerts

logger = logging.getLogger(__name__)

SETUP_INSTRUCTIONS = """
✗ OAuth2 token not found. Bookmarks require user-context auth.

Setup steps:
1. Go to developer.twitter.com -> your app -> User authentication settings
2. Enable OAuth 2.0
3. Set callback URL: http://localhost:3000/callback
4. Enable scopes: bookmark.read, tweet.read, users.read, offline.access
5. Run: get-bookmark-token
6. Add X_OAUTH2_ACCESS_TOKEN to {env_file}
"""


def handle_show(config: MonitorConfig, console: Console) -> int:
    """Print stored alerts without modifying state"""
    show_alerts(BookmarkMonitor(config).show(), console)
    return 0


def handle_clear(config: MonitorConfig, console: Console) -> int:
    """Empty the alert list; the seen-set is left alone"""
    BookmarkMonitor(config).clear()
    console.print("Bookmark alerts cleared.")
    return 0


async def handle_check(config: MonitorConfig, console: Console) -> int:
    """
    Fetch bookmarks, score the unseen ones and record alerts

    Returns:
        Process exit code
    """
    if not config.access_token:
        console.print(SETUP_INSTRUCTIONS.format(env_file=config.env_file or "your env file"),
                      style="red", markup=False, highlight=False)
        return 1

    async with XApiClient(config.access_token, config.api_base) as client:
        monitor = BookmarkMonitor(config, client)

        if not config.user_id:
            target = f"@{config.username.lstrip('@')}" if config.username else "the authorized account"
            console.print(f"Looking up user ID for {target}...")
        user_id, looked_up = await monitor.resolve_user_id()
        if looked_up:
            console.print(f"User ID: {user_id} [dim](add X_USER_ID={user_id} to env to skip this step)[/dim]")

        console.print("Fetching bookmarks...")
        bookmarks = await monitor.fetch(user_id)
        console.print(f"Got {len(bookmarks)} bookmarks.")

        result = monitor.process(bookmarks)

    console.print(f"{result.new} new (unseen) bookmarks.")

    if result.new == 0:
        console.print("Nothing new.")
    elif result.alerts_added > 0:
        console.print(f"[green]✓ {result.alerts_added} relevant bookmark(s) added to alerts.[/green] Run --show to view.")
    else:
        console.print(f"[green]✓ {result.new} bookmarks marked seen, none were relevant.[/green]")

    return 0
