"""Alert display functionality for CLI"""

from typing import List

from rich.console import Console
from rich.markup import escape

from bookmarks import Alert

TEXT_PREVIEW_CHARS = 120


def show_alerts(alerts: List[Alert], console: Console) -> None:
    """
    Print alerts in append order

    Args:
        alerts: Alerts as stored
        console: Rich console for output
    """
    if not alerts:
        console.print("No bookmark alerts.")
        return

    console.print(f"\n[bold]📌 {len(alerts)} bookmark alert(s):[/bold]\n")
    for alert in alerts:
        console.print(f"[cyan][{alert.relevance_score}/3][/cyan] [bold]{escape(alert.project)}[/bold]", highlight=False)
        console.print(f"  {alert.text[:TEXT_PREVIEW_CHARS]}...", markup=False, highlight=False)
        console.print(f"  Reason: {alert.reason}", markup=False, highlight=False)
        console.print(f"  URL: {alert.url}", markup=False, highlight=False)
        console.print(f"  Saved: {alert.timestamp}\n", markup=False, highlight=False)
