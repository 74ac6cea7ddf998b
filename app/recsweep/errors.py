"""Exception hierarchy for recsweep.

None of these are process-fatal inside an evaluation cycle; each is
caught at the seam where it can be turned into a log line, a
notification or a failed result.
"""


class RecsweepError(Exception):
    """Base exception for all recsweep errors."""


class ProbeError(RecsweepError):
    """Raised when the volume under a path cannot be statted."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot query disk space for {path}: {reason}")


class ScanError(RecsweepError):
    """Raised when a monitored directory is missing or unreadable."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot scan {path}: {reason}")


class DeleteError(RecsweepError):
    """Raised when a single directory cannot be removed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot delete {path}: {reason}")


class NotifyError(RecsweepError):
    """Raised when a notification cannot be delivered."""


class ConfigError(RecsweepError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""
