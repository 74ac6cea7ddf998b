"""Unit tests for volume resolution and space probing."""

import os
from collections import namedtuple
from pathlib import Path
from unittest.mock import patch

import pytest
from recsweep.errors import ProbeError
from recsweep.storage.probe import VolumeSpaceProbe, resolve_volume

Usage = namedtuple("Usage", ["total", "used", "free"])

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX mount resolution")


class TestResolveVolume:
    """Tests for resolve_volume."""

    def test_existing_path_maps_to_mount_point(self, tmp_path: Path) -> None:
        """The result is a mount point that contains the path."""
        volume = resolve_volume(tmp_path)

        assert os.path.ismount(volume)
        assert str(tmp_path.resolve()).startswith(volume) or volume == "/"

    def test_missing_path_uses_existing_ancestor(self, tmp_path: Path) -> None:
        """A path that does not exist yet resolves like its parent."""
        missing = tmp_path / "not" / "created" / "yet"

        assert resolve_volume(missing) == resolve_volume(tmp_path)

    def test_sibling_paths_share_volume(self, tmp_path: Path) -> None:
        (tmp_path / "cam1").mkdir()
        (tmp_path / "cam2").mkdir()

        assert resolve_volume(tmp_path / "cam1") == resolve_volume(tmp_path / "cam2")

    def test_root(self) -> None:
        assert resolve_volume("/") == "/"


class TestVolumeSpaceProbe:
    """Tests for VolumeSpaceProbe."""

    def test_probe_reports_usage(self, tmp_path: Path) -> None:
        """The snapshot carries disk_usage figures for the resolved volume."""
        with patch(
            "recsweep.storage.probe.shutil.disk_usage",
            return_value=Usage(total=1000, used=600, free=400),
        ) as mock_usage:
            info = VolumeSpaceProbe().probe(tmp_path)

        assert info.total_bytes == 1000
        assert info.free_bytes == 400
        assert info.volume_key == resolve_volume(tmp_path)
        mock_usage.assert_called_once_with(info.volume_key)

    def test_probe_live(self, tmp_path: Path) -> None:
        """A real probe returns sane figures."""
        info = VolumeSpaceProbe().probe(tmp_path)

        assert info.total_bytes > 0
        assert 0 <= info.free_bytes <= info.total_bytes

    def test_probe_failure_raises_probe_error(self, tmp_path: Path) -> None:
        """OS failures surface as ProbeError naming the path."""
        error = OSError(5, "Input/output error")
        with (
            patch("recsweep.storage.probe.shutil.disk_usage", side_effect=error),
            pytest.raises(ProbeError) as exc_info,
        ):
            VolumeSpaceProbe().probe(tmp_path)

        assert exc_info.value.path == str(tmp_path)
        assert exc_info.value.reason == "Input/output error"
        assert "Cannot query disk space" in str(exc_info.value)
