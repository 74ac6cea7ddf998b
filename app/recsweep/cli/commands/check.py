"""Check command: one evaluation cycle without side effects.

Probes every monitored volume, shows free space per path and the
consolidated deletion plan. Nothing is notified, scheduled or deleted.
"""

from typing import Annotated

import typer

from recsweep.cli.display import (
    create_plan_table,
    create_space_table,
    plans_to_json,
    print_plan_summary,
)
from recsweep.cli.types import OutputFormat, load_command_config
from recsweep.core.monitor import create_monitor
from recsweep.utils.formatting import console, print_success

app = typer.Typer(
    name="check",
    help="Check free space and show what would be deleted.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def check(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Check free space on all monitored volumes.

    Examples:
        recsweep check
        recsweep check --format json
    """
    config = load_command_config(ctx)
    monitor = create_monitor(config, dry_run=True)
    report = monitor.run_cycle(plan_only=True)

    evaluations = list(report.evaluations)
    plans = list(report.plans)

    if output_format == OutputFormat.JSON:
        console.print_json(plans_to_json(evaluations, plans))
        return

    console.print(create_space_table(evaluations))

    if not plans:
        print_success("Disk space sufficient. Nothing to delete.")
    else:
        console.print(create_plan_table(plans))
        print_plan_summary(plans)

    if any(e.failed for e in evaluations):
        raise typer.Exit(code=1)
