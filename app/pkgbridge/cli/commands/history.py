"""History command for viewing past install and uninstall attempts.

This module provides the `pkgbridge history` command.
"""

from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from pkgbridge.cli.types import echo_json
from pkgbridge.core.state import StateManager
from pkgbridge.models.history import HistoryEntry
from pkgbridge.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of install and uninstall attempts.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            help="Show entries since date (YYYY-MM-DD).",
        ),
    ] = None,
    failed_only: Annotated[
        bool,
        typer.Option(
            "--failed",
            help="Only show failed attempts.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of install and uninstall attempts.

    Examples:
        pkgbridge history              # Show last 20 entries
        pkgbridge history -n 50        # Show last 50 entries
        pkgbridge history --since 2026-01-01
        pkgbridge history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history()

    if since:
        try:
            since_date = datetime.fromisoformat(since).strftime("%Y-%m-%d")
        except ValueError:
            typer.echo(f"Invalid date format: {since}. Use YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1) from None
        entries = [e for e in entries if e.timestamp[:10] >= since_date]

    if failed_only:
        entries = [e for e in entries if not e.success]

    entries = entries[:limit]

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        echo_json([entry.to_dict() for entry in entries])
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table."""
    table = Table(title="Package History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Action", style="green")
    table.add_column("Backend", style="dim")
    table.add_column("Packages", style="white")
    table.add_column("Result")

    for entry in entries:
        pkg_count = len(entry.packages)
        pkg_names = ", ".join(entry.packages[:3])
        if pkg_count > 3:
            pkg_names += f" (+{pkg_count - 3} more)"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            entry.action_type.value,
            entry.backend.value,
            pkg_names,
            "[green]ok[/]" if entry.success else f"[red]{entry.error_type or 'failed'}[/]",
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO 8601 timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")
