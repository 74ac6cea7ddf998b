"""Run command: the long-running monitoring service.

Checks disk space immediately and then on the configured cron
schedule, arming deferred deletion waves as needed.
"""

import logging
from typing import Annotated

import typer

from recsweep.cli.types import load_command_config
from recsweep.core.monitor import create_monitor
from recsweep.core.trigger import CronTrigger
from recsweep.utils.formatting import print_error, print_info

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="run",
    help="Run the monitoring service.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def run(
    ctx: typer.Context,
    immediate: Annotated[
        bool,
        typer.Option(
            "--immediate/--no-immediate",
            help="Check once right away before following the schedule.",
        ),
    ] = True,
) -> None:
    """Monitor recording volumes until interrupted.

    Examples:
        recsweep run
        recsweep -c /etc/recsweep.toml run --no-immediate
    """
    config = load_command_config(ctx)
    monitor = create_monitor(config)

    try:
        trigger = CronTrigger(config.cron_schedule, monitor.run_cycle, run_immediately=immediate)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_info(
        f"Monitoring {len(config.recordings_paths)} path(s) on schedule "
        f"'{config.cron_schedule}' (threshold {config.min_free_space_gb:g} GB, "
        f"buffer {config.buffer_percentage:g}%, delay {config.delete_delay_hours:g} h)"
    )
    if config.dry_run:
        print_info("Dry-run mode: nothing will be deleted.")

    try:
        trigger.run_forever()
    except KeyboardInterrupt:
        trigger.stop()
        if monitor.scheduler.is_running:
            logger.warning("Exiting with a deletion wave pending; it will not run")
        print_info("Stopped.")
