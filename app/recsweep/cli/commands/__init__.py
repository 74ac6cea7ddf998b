"""CLI commands for recsweep.

This package contains all subcommand implementations.
"""

from recsweep.cli.commands import check, config, history, run, sweep

__all__ = ["check", "config", "history", "run", "sweep"]
