"""Sweep command: evaluate and delete immediately.

Runs one evaluation cycle and executes the consolidated plan right
away instead of after the configured delay. Probe error notices, the
warning and the completion report go out as for scheduled waves; the
warning announces an immediate deletion.
"""

from typing import Annotated

import typer

from recsweep.cli.display import (
    create_plan_table,
    create_results_table,
    print_plan_summary,
    print_results_summary,
)
from recsweep.cli.types import load_command_config
from recsweep.core.monitor import create_monitor
from recsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    name="sweep",
    help="Delete the oldest recordings now if space is low.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def sweep(
    ctx: typer.Context,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Free space now by deleting the oldest recording directories."""
    config = load_command_config(ctx)
    effective_dry_run = dry_run or config.dry_run
    monitor = create_monitor(config, dry_run=effective_dry_run)

    cycle = monitor.run_cycle(plan_only=True)
    monitor.report_probe_errors(cycle.evaluations)
    plans = list(cycle.plans)
    if not plans:
        print_success("Disk space sufficient. Nothing to delete.")
        return

    console.print(create_plan_table(plans, dry_run=effective_dry_run))
    print_plan_summary(plans)

    if not effective_dry_run and not yes:
        confirmed = typer.confirm("\nDelete these directories?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    if monitor.scheduler.is_running:
        print_error("Another deletion wave is in progress.")
        raise typer.Exit(code=1)

    monitor.warn_immediate(plans)
    report = monitor.scheduler.execute_now(plans)
    if report is None:
        print_error("Another deletion wave is in progress.")
        raise typer.Exit(code=1)

    console.print(create_results_table(report))
    print_results_summary(report)

    if not report.all_succeeded:
        raise typer.Exit(code=1)
