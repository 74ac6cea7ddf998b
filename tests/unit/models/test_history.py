"""Unit tests for history models.

Tests for HistoryItem, HistoryEntry and entry_from_report.
"""

import json

import pytest
from recsweep.models.history import HistoryEntry, HistoryItem, entry_from_report
from recsweep.storage.models import DirectoryRecord, RetainedDirectory, WaveReport


class TestHistoryItem:
    """Tests for HistoryItem."""

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValueError, match="Path cannot be empty"):
            HistoryItem(path="", size_bytes=0)

    def test_error_only_serialized_when_set(self) -> None:
        assert "error" not in HistoryItem(path="/rec/a", size_bytes=1).to_dict()
        assert HistoryItem(path="/rec/a", size_bytes=1, removed=False, error="busy").to_dict()[
            "error"
        ] == "busy"

    def test_from_dict_defaults(self) -> None:
        item = HistoryItem.from_dict({"path": "/rec/a", "size_bytes": "5"})

        assert item.size_bytes == 5
        assert item.removed is True
        assert item.error is None


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def test_requires_items(self) -> None:
        with pytest.raises(ValueError, match="at least one item"):
            HistoryEntry(id="abc", timestamp="2026-01-01T00:00:00+00:00", items=())

    def test_requires_id(self) -> None:
        with pytest.raises(ValueError, match="ID cannot be empty"):
            HistoryEntry(
                id="",
                timestamp="2026-01-01T00:00:00+00:00",
                items=(HistoryItem(path="/rec/a", size_bytes=1),),
            )

    def test_json_line_is_compact_and_parses_back(self) -> None:
        entry = HistoryEntry(
            id="abc123456789",
            timestamp="2026-01-01T00:00:00+00:00",
            items=(
                HistoryItem(path="/rec/a", size_bytes=10),
                HistoryItem(path="/rec/b", size_bytes=20, removed=False, error="busy"),
            ),
            freed_bytes=10,
            metadata={"volume": "/mnt/a"},
        )

        line = entry.to_json_line()

        assert "\n" not in line
        assert json.loads(line)["metadata"] == {"volume": "/mnt/a"}
        assert HistoryEntry.from_json_line(line) == entry

    def test_counts(self) -> None:
        entry = HistoryEntry(
            id="abc",
            timestamp="t",
            items=(
                HistoryItem(path="/rec/a", size_bytes=1),
                HistoryItem(path="/rec/b", size_bytes=1, removed=False, error="x"),
                HistoryItem(path="/rec/c", size_bytes=1, removed=False, error="y"),
            ),
        )

        assert entry.removed_count == 1
        assert entry.retained_count == 2


class TestEntryFromReport:
    """Tests for entry_from_report."""

    def test_builds_entry_from_wave(self) -> None:
        removed = DirectoryRecord(path="/rec/a", size_bytes=10, mtime=1.0)
        kept = DirectoryRecord(path="/rec/b", size_bytes=20, mtime=2.0)
        report = WaveReport(
            removed=(removed,),
            retained=(RetainedDirectory(record=kept, error="Permission denied"),),
            finished_at="2026-01-26T14:30:00+00:00",
            dry_run=True,
        )

        entry = entry_from_report(report)

        assert len(entry.id) == 12
        assert entry.timestamp == "2026-01-26T14:30:00+00:00"
        assert entry.freed_bytes == 10
        assert entry.dry_run is True
        assert [i.path for i in entry.items] == ["/rec/a", "/rec/b"]
        assert entry.items[1].removed is False
        assert entry.items[1].error == "Permission denied"

    def test_empty_wave_rejected(self) -> None:
        with pytest.raises(ValueError):
            entry_from_report(WaveReport(removed=(), retained=()))
