"""Shared helpers for CLI commands.

This module provides the config-loading and logging setup used by
every command that talks to the monitored volumes.
"""

import logging
from enum import Enum
from pathlib import Path

import typer

from recsweep.core.config import SweepConfig, require_config
from recsweep.utils.log import configure_logging


class OutputFormat(str, Enum):
    """Output format options for reports."""

    TABLE = "table"
    JSON = "json"


def get_config_path(ctx: typer.Context) -> Path | None:
    """Config path given with --config, if any."""
    obj = ctx.obj or {}
    return obj.get("config_path")


def load_command_config(ctx: typer.Context) -> SweepConfig:
    """Load the config and set up logging for a command.

    --verbose selects DEBUG, --quiet selects WARNING; otherwise the
    configured log level applies.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    obj = ctx.obj or {}
    config = require_config(get_config_path(ctx))

    if obj.get("verbose"):
        level: str | int = logging.DEBUG
    elif obj.get("quiet"):
        level = logging.WARNING
    else:
        level = config.log_level

    configure_logging(level, config.log_file)
    return config
