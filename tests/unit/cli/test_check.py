"""Unit tests for the check command."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import tomli_w
from recsweep.cli.main import app
from recsweep.core.monitor import CycleReport
from recsweep.storage.models import PathEvaluation
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def recordings(tmp_path: Path) -> Path:
    root = tmp_path / "recordings"
    (root / "2026-01-01").mkdir(parents=True)
    (root / "2026-01-01" / "clip.mp4").write_bytes(b"x" * 64)
    return root


def _config(tmp_path: Path, recordings: Path, min_free_gb: float) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        tomli_w.dumps({"recordings_paths": [str(recordings)], "min_free_space_gb": min_free_gb})
    )
    return path


class TestCheckCommand:
    """Tests for recsweep check."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["check", "--help"])

        assert result.exit_code == 0
        assert "--format" in result.stdout

    def test_missing_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["-c", str(tmp_path / "none.toml"), "check"])

        assert result.exit_code == 1
        assert "recsweep config init" in result.output

    def test_sufficient_space(self, tmp_path: Path, recordings: Path) -> None:
        config = _config(tmp_path, recordings, 0.000001)

        result = runner.invoke(app, ["-q", "-c", str(config), "check"])

        assert result.exit_code == 0
        assert "Nothing to delete" in result.stdout

    def test_low_space_shows_plan_without_deleting(self, tmp_path: Path, recordings: Path) -> None:
        """A threshold above the disk size plans deletions but touches nothing."""
        config = _config(tmp_path, recordings, 10_000_000)

        result = runner.invoke(app, ["-q", "-c", str(config), "check"])

        assert result.exit_code == 0
        assert "Deletion Plan" in result.stdout
        assert (recordings / "2026-01-01").exists()

    def test_json_output(self, tmp_path: Path, recordings: Path) -> None:
        config = _config(tmp_path, recordings, 0.000001)

        result = runner.invoke(app, ["-q", "-c", str(config), "check", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["plans"] == []
        assert data["paths"][0]["path"] == str(recordings)
        assert data["paths"][0]["free_bytes"] > 0

    def test_probe_failure_exits_nonzero(self, tmp_path: Path, recordings: Path) -> None:
        config = _config(tmp_path, recordings, 50)
        monitor = MagicMock()
        monitor.run_cycle.return_value = CycleReport(
            evaluations=(
                PathEvaluation(
                    path=str(recordings), volume_key="/", space=None, error="Input/output error"
                ),
            )
        )

        with patch("recsweep.cli.commands.check.create_monitor", return_value=monitor):
            result = runner.invoke(app, ["-q", "-c", str(config), "check"])

        assert result.exit_code == 1
        monitor.run_cycle.assert_called_once_with(plan_only=True)
