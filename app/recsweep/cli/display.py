"""Shared Rich display functions for space reports and deletion results.

Provides reusable table builders and summary printers for the check,
sweep and run commands.
"""

import json
from datetime import datetime

from rich.table import Table

from recsweep.storage.models import DeletionPlan, PathEvaluation, WaveReport
from recsweep.utils.formatting import console, format_size, print_success


def create_space_table(evaluations: list[PathEvaluation]) -> Table:
    """Create a Rich table showing free space per monitored path.

    Args:
        evaluations: Per-path results of an evaluation cycle.

    Returns:
        Rich Table with Path, Volume, Free, Used and Status columns.
    """
    table = Table(
        title="Monitored Paths",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Volume", style="muted")
    table.add_column("Free", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Status")

    for evaluation in evaluations:
        space = evaluation.space
        if evaluation.error is not None or space is None:
            table.add_row(
                evaluation.path,
                evaluation.volume_key or "-",
                "-",
                "-",
                f"[error]{evaluation.error or 'unknown'}[/error]",
            )
            continue

        if evaluation.candidates:
            status = f"[warning]{len(evaluation.candidates)} candidate(s)[/warning]"
        else:
            status = "[success]OK[/success]"

        table.add_row(
            evaluation.path,
            evaluation.volume_key or "-",
            format_size(space.free_bytes),
            f"{space.used_percentage:.1f}%",
            status,
        )

    return table


def create_plan_table(plans: list[DeletionPlan], dry_run: bool = False) -> Table:
    """Create a Rich table listing the directories each plan deletes.

    Args:
        plans: Consolidated deletion plans.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for plan display.
    """
    title = "Deletion Plan (Dry Run)" if dry_run else "Deletion Plan"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Volume", style="muted")
    table.add_column("Directory", no_wrap=True)
    table.add_column("Size", justify="right", style="info")
    table.add_column("Modified", style="muted")

    for plan in plans:
        for record in plan.directories:
            table.add_row(
                plan.volume_key,
                f"[removed]{record.path}[/removed]",
                format_size(record.size_bytes),
                datetime.fromtimestamp(record.mtime).strftime("%Y-%m-%d %H:%M"),
            )

    return table


def create_results_table(report: WaveReport) -> Table:
    """Create a Rich table displaying the outcome of a deletion wave.

    Args:
        report: Outcome of the wave.

    Returns:
        Rich Table with Status, Directory, Size and Message columns.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Directory", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Message")

    for record in report.removed:
        message = "dry-run" if report.dry_run else ""
        table.add_row(
            "[success]OK[/success]",
            record.path,
            format_size(record.size_bytes),
            f"[muted]{message}[/muted]",
        )
    for retained in report.retained:
        table.add_row(
            "[error]FAIL[/error]",
            retained.record.path,
            format_size(retained.record.size_bytes),
            f"[muted]{retained.error}[/muted]",
        )

    return table


def print_plan_summary(plans: list[DeletionPlan]) -> None:
    """Print how much each plan frees against its volume's deficit."""
    for plan in plans:
        line = (
            f"{plan.volume_key}: {len(plan.directories)} directories, "
            f"{format_size(plan.total_bytes)} of {format_size(plan.space_to_free_bytes)} needed"
        )
        if plan.is_sufficient:
            console.print(f"[info]{line}[/info]")
        else:
            console.print(
                f"[warning]{line} (short by {format_size(plan.shortfall_bytes)})[/warning]"
            )


def print_results_summary(report: WaveReport) -> None:
    """Print a summary of a deletion wave."""
    if report.all_succeeded:
        print_success(
            f"All {len(report.removed)} directories deleted, "
            f"{format_size(report.freed_bytes)} freed."
        )
    else:
        console.print(
            f"\n[success]{len(report.removed)} deleted[/success], "
            f"[error]{len(report.retained)} failed[/error]"
        )


def plans_to_json(evaluations: list[PathEvaluation], plans: list[DeletionPlan]) -> str:
    """Serialize a check result for scripting."""
    data = {
        "paths": [
            {
                "path": e.path,
                "volume": e.volume_key,
                "free_bytes": e.space.free_bytes if e.space else None,
                "total_bytes": e.space.total_bytes if e.space else None,
                "error": e.error,
            }
            for e in evaluations
        ],
        "plans": [
            {
                "volume": p.volume_key,
                "space_to_free_bytes": p.space_to_free_bytes,
                "total_bytes": p.total_bytes,
                "directories": [
                    {"path": d.path, "size_bytes": d.size_bytes, "modified_at": d.modified_at}
                    for d in p.directories
                ],
            }
            for p in plans
        ],
    }
    return json.dumps(data, indent=2)
