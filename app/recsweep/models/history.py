"""History entry model for executed deletion waves.

This module defines data structures for recording each deletion wave in
an append-only history file, so operators can audit what was removed
and when.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from recsweep.storage.models import WaveReport


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """Single directory touched by a deletion wave.

    Attributes:
        path: Absolute directory path.
        size_bytes: Size recorded when the directory was scanned.
        removed: Whether the directory was actually removed.
        error: Failure reason for retained directories.
    """

    path: str
    size_bytes: int
    removed: bool = True
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "path": self.path,
            "size_bytes": self.size_bytes,
            "removed": self.removed,
        }
        if self.error is not None:
            result["error"] = self.error
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryItem:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            path=data["path"],
            size_bytes=int(data["size_bytes"]),
            removed=data.get("removed", True),
            error=data.get("error"),
        )


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Record of one executed deletion wave.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the wave finished (ISO 8601 format with timezone).
        items: Directories the wave touched.
        freed_bytes: Bytes reclaimed by removed directories.
        dry_run: Whether the wave ran without touching disk.
        metadata: Additional context (command, volumes, etc.).
    """

    id: str
    timestamp: str
    items: tuple[HistoryItem, ...]
    freed_bytes: int = 0
    dry_run: bool = False
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "History entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if not self.items:
            msg = "History entry must have at least one item"
            raise ValueError(msg)

    @property
    def removed_count(self) -> int:
        return sum(1 for item in self.items if item.removed)

    @property
    def retained_count(self) -> int:
        return sum(1 for item in self.items if not item.removed)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "items": [item.to_dict() for item in self.items],
            "freed_bytes": self.freed_bytes,
            "dry_run": self.dry_run,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If item data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            items=tuple(HistoryItem.from_dict(item) for item in data["items"]),
            freed_bytes=int(data.get("freed_bytes", 0)),
            dry_run=data.get("dry_run", False),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to JSON line for JSONL storage (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> HistoryEntry:
        """Deserialize from JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def entry_from_report(report: WaveReport, metadata: dict[str, Any] | None = None) -> HistoryEntry:
    """Create a history entry for an executed wave.

    Args:
        report: Outcome of the wave.
        metadata: Optional additional context.

    Returns:
        New HistoryEntry with a generated ID and timestamp.

    Raises:
        ValueError: If the wave touched no directories.
    """
    items = [HistoryItem(path=d.path, size_bytes=d.size_bytes) for d in report.removed]
    items.extend(
        HistoryItem(
            path=r.record.path,
            size_bytes=r.record.size_bytes,
            removed=False,
            error=r.error,
        )
        for r in report.retained
    )
    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=report.finished_at or datetime.now(UTC).isoformat(),
        items=tuple(items),
        freed_bytes=report.freed_bytes,
        dry_run=report.dry_run,
        metadata=metadata or {},
    )
