"""Config commands: create and inspect the service configuration."""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from recsweep.cli.types import get_config_path
from recsweep.core.config import config_to_dict, get_default_config, require_config, save_config
from recsweep.core.paths import get_config_path as get_default_config_path
from recsweep.errors import ConfigError
from recsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create and inspect the configuration.",
    no_args_is_help=True,
)


@app.command()
def init(
    ctx: typer.Context,
    recordings: Annotated[
        list[Path] | None,
        typer.Option(
            "--recordings",
            "-r",
            help="Recording directory to monitor (repeatable).",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path(ctx) or get_default_config_path()

    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    config = get_default_config(recordings or None)
    try:
        saved = save_config(config, path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
    print_info("Edit the [email] section before running 'recsweep run'.")


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as TOML."""
    config = require_config(get_config_path(ctx))
    data = config_to_dict(config)

    email = data.get("email")
    if isinstance(email, dict):
        smtp = email.get("smtp")
        if isinstance(smtp, dict) and smtp.get("password"):
            smtp["password"] = "********"

    console.print(tomli_w.dumps(data), markup=False, highlight=False)
