"""Storage domain models for space evaluation and deletion planning.

This module defines the immutable data structures that flow through an
evaluation cycle: space snapshots per volume, directory records from an
inventory scan, per-path evaluations, consolidated deletion plans and
per-directory deletion results.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

# Mount point (POSIX) or drive anchor (Windows) of a filesystem.
VolumeKey = str

GIB = 1024 * 1024 * 1024


def bytes_to_gb(value: float) -> float:
    """Convert a byte count to binary gigabytes."""
    return value / GIB


def gb_to_bytes(value: float) -> int:
    """Convert binary gigabytes to a whole byte count."""
    return int(value * GIB)


@dataclass(frozen=True, slots=True)
class SpaceInfo:
    """Point-in-time space snapshot of one volume.

    Attributes:
        volume_key: Volume the snapshot was taken on.
        total_bytes: Capacity of the volume.
        free_bytes: Bytes available to the current user.
    """

    volume_key: VolumeKey
    total_bytes: int
    free_bytes: int

    def __post_init__(self) -> None:
        """Validate space figures after initialization."""
        if self.total_bytes < 0 or self.free_bytes < 0:
            msg = "Space figures cannot be negative"
            raise ValueError(msg)

    @property
    def used_bytes(self) -> int:
        """Bytes in use on the volume."""
        return max(self.total_bytes - self.free_bytes, 0)

    @property
    def used_percentage(self) -> float:
        """Share of the volume in use, 0-100."""
        if self.total_bytes == 0:
            return 0.0
        return self.used_bytes / self.total_bytes * 100

    @property
    def total_gb(self) -> float:
        return bytes_to_gb(self.total_bytes)

    @property
    def free_gb(self) -> float:
        return bytes_to_gb(self.free_bytes)


@dataclass(frozen=True, slots=True)
class DirectoryRecord:
    """Immediate child directory of a monitored path.

    Attributes:
        path: Absolute path of the directory.
        size_bytes: Recursive size (best-effort, unreadable entries count as zero).
        mtime: Last modification time as a POSIX timestamp.
    """

    path: str
    size_bytes: int
    mtime: float

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def sort_key(self) -> tuple[float, str]:
        """Oldest-first ordering key; equal timestamps fall back to the path."""
        return (self.mtime, self.path)

    @property
    def size_gb(self) -> float:
        return bytes_to_gb(self.size_bytes)

    @property
    def modified_at(self) -> str:
        """Modification time in ISO 8601 format (UTC)."""
        return datetime.fromtimestamp(self.mtime, tz=UTC).isoformat()


def sort_oldest_first(records: list[DirectoryRecord]) -> list[DirectoryRecord]:
    """Return records ordered by modification time, then path."""
    return sorted(records, key=lambda r: r.sort_key)


@dataclass(frozen=True, slots=True)
class PathEvaluation:
    """Outcome of probing, scanning and selecting for one monitored path.

    Attributes:
        path: Monitored root directory.
        volume_key: Volume holding the path (None if it could not be resolved).
        space: Space snapshot shared by every path on the same volume.
        candidates: Directories this path would delete on its own, oldest first.
        error: Probe failure message; set means the path was skipped.
    """

    path: str
    volume_key: VolumeKey | None
    space: SpaceInfo | None
    candidates: tuple[DirectoryRecord, ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class DeletionPlan:
    """Consolidated, oldest-first deletion plan for one volume.

    Attributes:
        volume_key: Volume the plan frees space on.
        directories: Directories to delete, oldest first.
        space_to_free_bytes: Volume-level deficit the plan addresses.
        space: Space snapshot the plan was computed from.
    """

    volume_key: VolumeKey
    directories: tuple[DirectoryRecord, ...]
    space_to_free_bytes: int
    space: SpaceInfo

    @property
    def total_bytes(self) -> int:
        """Bytes the plan is expected to reclaim."""
        return sum(d.size_bytes for d in self.directories)

    @property
    def is_sufficient(self) -> bool:
        """Whether the selected directories cover the deficit."""
        return self.total_bytes >= self.space_to_free_bytes

    @property
    def shortfall_bytes(self) -> int:
        """Bytes still missing after the plan runs (0 when sufficient)."""
        return max(self.space_to_free_bytes - self.total_bytes, 0)


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of removing a single directory.

    Attributes:
        path: Absolute path that was operated on.
        success: Whether the directory is gone.
        error: Error message if the removal failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing removed).
    """

    path: str
    success: bool
    error: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class RetainedDirectory:
    """A planned directory that is still on disk after a wave."""

    record: DirectoryRecord
    error: str


@dataclass(frozen=True, slots=True)
class WaveReport:
    """Outcome of one executed deletion wave.

    Attributes:
        removed: Directories actually removed.
        retained: Directories that failed to delete, with the reason.
        space_after: Fresh snapshot per affected volume (None if the re-probe failed).
        started_at: ISO 8601 time the execution began.
        finished_at: ISO 8601 time the execution ended.
        dry_run: Whether the wave ran without touching disk.
    """

    removed: tuple[DirectoryRecord, ...]
    retained: tuple[RetainedDirectory, ...]
    space_after: dict[VolumeKey, SpaceInfo | None] = field(default_factory=lambda: {})
    started_at: str = ""
    finished_at: str = ""
    dry_run: bool = False

    @property
    def freed_bytes(self) -> int:
        return sum(d.size_bytes for d in self.removed)

    @property
    def all_succeeded(self) -> bool:
        return not self.retained
