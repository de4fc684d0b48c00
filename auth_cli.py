"""One-time X OAuth 2.0 PKCE flow that prints a user access token with bookmark.read scope

Prerequisites:
1. developer.twitter.com -> your app -> User authentication settings
2. Enable OAuth 2.0 and set the callback URL to http://localhost:3000/callback
3. Enable scopes: bookmark.read, tweet.read, users.read, offline.access
4. Set X_CLIENT_ID and X_CLIENT_SECRET in ~/.config/env/global.env
   (the OAuth 2.0 Client ID and Client Secret, not the consumer key)
"""

import argparse
import asyncio
import logging
import sys
import webbrowser
from typing import Optional

import httpx
from rich.console import Console
from rich.markup import escape

from config import AuthConfig, ConfigLoader, MissingCredentialsError, load_auth_config
from x_oauth import (
    CallbackError,
    CallbackServerError,
    TokenExchangeError,
    TokenResponse,
    create_authorization_flow,
    exchange_code_for_tokens,
    start_callback_server,
)
from utils.debug_console import configure_logging

logger = logging.getLogger(__name__)


class BookmarkTokenFlow:
    """Handle the X OAuth authorization flow in the CLI"""

    def __init__(self, config: AuthConfig, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console()

    def _open_browser(self, url: str) -> None:
        """Best-effort browser launch; the URL is always printed as a fallback"""
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error as e:
            logger.debug(f"Browser launch failed: {e}")
            opened = False

        if opened:
            self.console.print("[green]✓ Browser opened[/green]")
        else:
            self.console.print("[yellow]Couldn't auto-open browser. Copy the URL above and paste it manually.[/yellow]")

    async def authenticate(self) -> TokenResponse:
        """
        Run the authorization flow once.

        Returns:
            TokenResponse from the token endpoint

        Raises:
            CallbackServerError: callback port could not be bound
            CallbackError: the callback was invalid; no exchange was attempted
            TokenExchangeError: the provider rejected the code
        """
        self.console.print("\n[bold cyan]X OAuth 2.0 PKCE Auth Flow[/bold cyan]\n")

        flow = create_authorization_flow(self.config)
        logger.debug(f"Generated auth URL: {flow.url[:60]}...")

        callback_server = await start_callback_server(
            flow.state,
            host=self.config.callback_host,
            port=self.config.callback_port,
            path=self.config.callback_path,
        )

        try:
            self.console.print("Opening browser to authorize...")
            self.console.print(f"\n[bold]URL:[/bold] [dim]{flow.url}[/dim]\n", soft_wrap=True)
            self._open_browser(flow.url)

            self.console.print(f"Waiting for callback on {self.config.redirect_uri} ...\n")
            result = await callback_server.wait_for_callback()
        finally:
            await callback_server.stop()

        if not result.ok:
            raise CallbackError(result)

        self.console.print("Exchanging authorization code for tokens...")
        return await exchange_code_for_tokens(self.config, result.code, flow.pkce.verifier)


def print_tokens(tokens: TokenResponse, console: Console, env_file: str = "~/.config/env/global.env") -> None:
    console.print(f"[green]✓ Success![/green] Add these to {env_file}:\n")
    for line in tokens.to_env_lines():
        console.print(line, markup=False, highlight=False, soft_wrap=True)
    console.print("\nCopy those lines into your env file and you're set.")


def main(argv=None):
    """Entry point for get-bookmark-token"""
    parser = argparse.ArgumentParser(description="Authorize bookmark access with X OAuth 2.0 (PKCE)")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    console = configure_logging(args.debug)

    try:
        loader = ConfigLoader()
        config = load_auth_config(loader)
        tokens = asyncio.run(BookmarkTokenFlow(config, console).authenticate())
    except MissingCredentialsError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(1)
    except CallbackServerError as e:
        console.print(f"[red]✗ Server error:[/red] {escape(str(e))}")
        sys.exit(1)
    except CallbackError as e:
        console.print(f"[red]✗ Authorization failed:[/red] {escape(str(e))}")
        sys.exit(1)
    except TokenExchangeError as e:
        console.print(f"[red]✗ Token exchange failed:[/red] {escape(str(e.payload if e.payload is not None else e))}")
        sys.exit(1)
    except httpx.RequestError as e:
        console.print(f"[red]✗ Network error during token exchange:[/red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)

    print_tokens(tokens, console, str(loader.env_path))
    sys.exit(0)


if __name__ == "__main__":
    main()
