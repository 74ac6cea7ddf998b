"""CLI package for recsweep.

This package contains the Typer application and all subcommands.
"""

from recsweep.cli.main import app

__all__ = ["app"]
