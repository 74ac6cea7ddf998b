"""Logging setup for the recsweep CLI and service."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from recsweep.utils.formatting import err_console

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO, log_file: Path | None = None) -> None:
    """Configure the root logger.

    Log records go to stderr through Rich; when log_file is given they
    are also appended there in plain text. Calling this again replaces
    the previously installed handlers.

    Args:
        level: Root log level (name or number).
        log_file: Optional file to append log records to.
    """
    handlers: list[logging.Handler] = [
        RichHandler(console=err_console, show_path=False, rich_tracebacks=True),
    ]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)
