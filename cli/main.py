"""CLI entry point and argument parsing for the bookmark monitor"""

import argparse
import asyncio
import sys

import httpx
from rich.markup import escape

from bookmarks import XApiError
from config import ConfigLoader, MissingCredentialsError, load_monitor_config
from cli.handlers import handle_check, handle_clear, handle_show
from utils.debug_console import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check X bookmarks for posts relevant to active projects"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--show", action="store_true", help="Show current alerts")
    mode.add_argument("--clear", action="store_true", help="Clear alerts")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    """Entry point for the bookmarks CLI"""
    args = build_parser().parse_args(argv)
    console = configure_logging(args.debug)

    try:
        config = load_monitor_config(ConfigLoader())

        if args.show:
            exit_code = handle_show(config, console)
        elif args.clear:
            exit_code = handle_clear(config, console)
        else:
            exit_code = asyncio.run(handle_check(config, console))

    except (XApiError, MissingCredentialsError) as e:
        console.print(f"\n[red]✗ Error:[/red] {escape(str(e))}", highlight=False)
        sys.exit(1)
    except httpx.RequestError as e:
        console.print(f"\n[red]✗ Error:[/red] network failure talking to the X API: {escape(str(e))}", highlight=False)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[red]✗ Error:[/red] {escape(str(e))}", highlight=False)
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
