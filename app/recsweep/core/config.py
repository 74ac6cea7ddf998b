"""Service configuration and settings.

This module provides the configuration models and I/O functions for the
recsweep service: the check schedule, the free-space threshold and
buffer, the monitored recording roots, the deletion delay and the email
transport used for operator notifications.

Configuration is stored in ~/.config/recsweep/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from croniter import croniter
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from recsweep.core.paths import get_config_path
from recsweep.errors import ConfigError, ConfigNotFoundError, ConfigParseError
from recsweep.storage.models import gb_to_bytes

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

DEFAULT_CRON_SCHEDULE = "0 */6 * * *"


class SmtpSettings(BaseModel):
    """SMTP transport settings.

    Attributes:
        host: SMTP server host name.
        port: SMTP server port.
        starttls: Upgrade the connection with STARTTLS (ignored with use_ssl).
        use_ssl: Connect with implicit TLS (usually port 465).
        username: Login user; no login is attempted when empty.
        password: Login password.
        timeout_seconds: Socket timeout for the SMTP session.
    """

    model_config = ConfigDict(extra="forbid")

    host: Annotated[str, Field(min_length=1, description="SMTP server host")] = "localhost"
    port: Annotated[int, Field(ge=1, le=65535, description="SMTP server port")] = 587
    starttls: Annotated[bool, Field(description="Use STARTTLS")] = True
    use_ssl: Annotated[bool, Field(description="Use implicit TLS")] = False
    username: Annotated[str, Field(description="SMTP login user")] = ""
    password: Annotated[str, Field(description="SMTP login password")] = ""
    timeout_seconds: Annotated[float, Field(gt=0, description="SMTP socket timeout")] = 30.0


class EmailSettings(BaseModel):
    """Operator email notification settings.

    Attributes:
        enabled: Send email; when False notifications are only logged.
        from_address: Sender address.
        to: Recipient addresses.
        subject_prefix: Text prepended to every subject line.
        smtp: Transport settings.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: Annotated[bool, Field(description="Send email notifications")] = True
    from_address: Annotated[str, Field(description="Sender address")] = "recsweep@localhost"
    to: Annotated[list[str], Field(default_factory=list, description="Recipient addresses")]
    subject_prefix: Annotated[str, Field(description="Subject prefix")] = "[recsweep]"
    smtp: Annotated[SmtpSettings, Field(default_factory=SmtpSettings)]


class SweepConfig(BaseModel):
    """Configuration of the recording sweeper.

    Attributes:
        cron_schedule: Five-field cron expression for periodic checks.
        min_free_space_gb: Free space each volume must keep, in GB.
        buffer_percentage: Extra margin freed on top of the threshold.
        recordings_paths: Monitored recording root directories.
        delete_delay_hours: Delay between the warning and the deletion.
        max_workers: Threads used to probe and scan paths within a cycle.
        dry_run: Report deletions without touching disk.
        log_level: Root log level when not overridden on the command line.
        log_file: Optional file receiving log output in addition to stderr.
        email: Notification settings.
    """

    model_config = ConfigDict(extra="forbid")

    cron_schedule: Annotated[str, Field(description="Cron expression")] = DEFAULT_CRON_SCHEDULE
    min_free_space_gb: Annotated[float, Field(gt=0, description="Free space threshold (GB)")] = 50.0
    buffer_percentage: Annotated[float, Field(ge=0, description="Buffer above target (%)")] = 10.0
    recordings_paths: Annotated[
        list[Path],
        Field(min_length=1, description="Monitored recording directories"),
    ]
    delete_delay_hours: Annotated[float, Field(ge=0, description="Warning-to-delete delay")] = 24.0
    max_workers: Annotated[int, Field(ge=1, le=64, description="Cycle worker threads")] = 4
    dry_run: Annotated[bool, Field(description="Simulate deletions")] = False
    log_level: Annotated[LogLevel, Field(description="Log level")] = "INFO"
    log_file: Annotated[Path | None, Field(description="Additional log file")] = None
    email: Annotated[EmailSettings, Field(default_factory=EmailSettings)]

    @field_validator("cron_schedule")
    @classmethod
    def validate_cron_schedule(cls, v: str) -> str:
        """Validate that the schedule is a standard five-field cron expression."""
        expr = v.strip()
        if len(expr.split()) != 5 or not croniter.is_valid(expr):
            msg = f"Invalid cron expression: '{v}'"
            raise ValueError(msg)
        return expr

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def min_free_bytes(self) -> int:
        """Free-space threshold in bytes."""
        return gb_to_bytes(self.min_free_space_gb)

    @property
    def delete_delay_seconds(self) -> float:
        """Deletion delay in seconds."""
        return self.delete_delay_hours * 3600


def load_config(path: Path | None = None) -> SweepConfig:
    """Load service configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated SweepConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    # Migration: single recordings_path -> recordings_paths list
    if "recordings_path" in data:
        logger.warning(
            "Deprecated 'recordings_path' in %s. Use 'recordings_paths = [...]' instead.",
            config_path,
        )
        single = data.pop("recordings_path")
        data.setdefault("recordings_paths", [single])

    try:
        return SweepConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: SweepConfig, path: Path | None = None) -> Path:
    """Save service configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The SweepConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: SweepConfig) -> dict[str, object]:
    """Convert SweepConfig to a dictionary for TOML serialization.

    Paths become strings and unset optional values are left out, since
    TOML has no null.

    Args:
        config: The SweepConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(mode="json", exclude_none=True)


def get_default_config(recordings_paths: list[Path] | None = None) -> SweepConfig:
    """Create a default SweepConfig.

    Args:
        recordings_paths: Monitored directories; defaults to ~/Recordings.

    Returns:
        SweepConfig with default settings.
    """
    paths = recordings_paths or [Path.home() / "Recordings"]
    return SweepConfig(recordings_paths=paths)


def require_config(config_path: Path | None = None) -> SweepConfig:
    """Load configuration or exit with helpful error message.

    This is a convenience wrapper around load_config() that handles
    common error cases by printing user-friendly messages and exiting.

    Args:
        config_path: Optional custom config path.

    Returns:
        Loaded and validated SweepConfig.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    import typer

    from recsweep.utils.formatting import print_error, print_info

    path = config_path or get_config_path()
    try:
        return load_config(path)
    except ConfigNotFoundError as e:
        print_error(f"Config not found: {path}")
        print_info("Run 'recsweep config init' to create one.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e
