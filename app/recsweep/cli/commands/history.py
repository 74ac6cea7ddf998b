"""History command for viewing past deletion waves.

This module provides the `recsweep history` command for auditing
which recording directories were deleted and when.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from recsweep.core.state import StateManager
from recsweep.models.history import HistoryEntry
from recsweep.utils.formatting import console, format_size, print_info

app = typer.Typer(
    name="history",
    help="View history of deletion waves.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of deletion waves.

    Examples:
        recsweep history            # Show last 20 waves
        recsweep history -n 50
        recsweep history --json     # JSON output for scripting
    """
    entries = StateManager().get_history(limit=limit)

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        console.print_json(json.dumps([e.to_dict() for e in entries]))
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table."""
    table = Table(title="Deletion History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Removed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Freed", justify="right")
    table.add_column("Directories", style="white")

    for entry in entries:
        names = ", ".join(item.path for item in entry.items[:3])
        if len(entry.items) > 3:
            names += f" (+{len(entry.items) - 3} more)"
        if entry.dry_run:
            names = f"[dim](dry run)[/dim] {names}"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            str(entry.removed_count),
            str(entry.retained_count),
            format_size(entry.freed_bytes),
            names,
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format ISO timestamp for display, falling back to the raw value."""
    try:
        dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
        return dt.astimezone().strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return iso_timestamp
