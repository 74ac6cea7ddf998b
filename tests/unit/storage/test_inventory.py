"""Unit tests for DirectoryInventory.

Tests scanning of monitored roots, recursive sizing and the handling
of missing or unreadable paths.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from recsweep.errors import ScanError
from recsweep.storage.inventory import DirectoryInventory


def _make_dir(root: Path, name: str, mtime: float, files: dict[str, int]) -> Path:
    directory = root / name
    directory.mkdir()
    for rel, size in files.items():
        target = directory / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"x" * size)
    os.utime(directory, (mtime, mtime))
    return directory


class TestScan:
    """Tests for DirectoryInventory.scan."""

    def test_lists_immediate_subdirectories_oldest_first(self, tmp_path: Path) -> None:
        """Each subdirectory becomes one record, sorted by mtime."""
        _make_dir(tmp_path, "newest", 3000.0, {"a.mp4": 10})
        _make_dir(tmp_path, "oldest", 1000.0, {"a.mp4": 5, "nested/b.mp4": 7})
        _make_dir(tmp_path, "middle", 2000.0, {})

        records = DirectoryInventory().scan(tmp_path)

        assert [Path(r.path).name for r in records] == ["oldest", "middle", "newest"]
        assert [r.size_bytes for r in records] == [12, 0, 10]
        assert records[0].mtime == 1000.0

    def test_paths_are_absolute(self, tmp_path: Path) -> None:
        _make_dir(tmp_path, "cam", 1000.0, {})

        records = DirectoryInventory().scan(tmp_path)

        assert Path(records[0].path).is_absolute()

    def test_top_level_files_ignored(self, tmp_path: Path) -> None:
        """Loose files in the monitored root are not candidates."""
        (tmp_path / "loose.mp4").write_bytes(b"x" * 100)
        _make_dir(tmp_path, "day1", 1000.0, {"a.mp4": 1})

        records = DirectoryInventory().scan(tmp_path)

        assert [Path(r.path).name for r in records] == ["day1"]

    def test_symlinked_directories_ignored(self, tmp_path: Path) -> None:
        """Symlinks at the top level are never reported."""
        outside = tmp_path / "outside"
        outside.mkdir()
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)

        assert DirectoryInventory().scan(root) == []

    def test_missing_path_is_empty(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A missing root yields an empty inventory and a warning."""
        with caplog.at_level(logging.WARNING):
            records = DirectoryInventory().scan(tmp_path / "missing")

        assert records == []
        assert "path does not exist" in caplog.text

    def test_empty_root(self, tmp_path: Path) -> None:
        assert DirectoryInventory().scan(tmp_path) == []


class TestScanStrict:
    """Tests for DirectoryInventory.scan_strict."""

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ScanError, match="path does not exist"):
            DirectoryInventory().scan_strict(tmp_path / "missing")

    def test_file_raises(self, tmp_path: Path) -> None:
        target = tmp_path / "file"
        target.write_text("x")

        with pytest.raises(ScanError, match="not a directory"):
            DirectoryInventory().scan_strict(target)

    def test_unlistable_root_raises(self, tmp_path: Path) -> None:
        with (
            patch.object(Path, "iterdir", side_effect=PermissionError(13, "Permission denied")),
            pytest.raises(ScanError, match="Permission denied"),
        ):
            DirectoryInventory().scan_strict(tmp_path)


class TestDirectorySize:
    """Tests for DirectoryInventory.directory_size."""

    def test_sums_nested_files(self, tmp_path: Path) -> None:
        directory = _make_dir(tmp_path, "d", 1.0, {"a": 3, "x/b": 4, "x/y/c": 5})

        assert DirectoryInventory().directory_size(directory) == 12

    def test_symlinks_not_counted(self, tmp_path: Path) -> None:
        """Symlinked files contribute nothing."""
        big = tmp_path / "big"
        big.write_bytes(b"x" * 1000)
        directory = _make_dir(tmp_path, "d", 1.0, {"a": 2})
        (directory / "link").symlink_to(big)

        assert DirectoryInventory().directory_size(directory) == 2

    def test_vanished_file_counts_zero(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A file that disappears mid-scan is skipped with a warning."""
        directory = _make_dir(tmp_path, "d", 1.0, {"a": 2, "b": 3})
        real_lstat = os.lstat

        def flaky_lstat(path, *args, **kwargs):
            if str(path).endswith(os.sep + "b"):
                raise FileNotFoundError(2, "No such file or directory", str(path))
            return real_lstat(path, *args, **kwargs)

        with (
            patch("recsweep.storage.inventory.os.lstat", side_effect=flaky_lstat),
            caplog.at_level(logging.WARNING),
        ):
            size = DirectoryInventory().directory_size(directory)

        assert size == 2
        assert "counted as zero" in caplog.text
