"""Unit tests for notification templates."""

import pytest
from recsweep.notify.templates import render_completion, render_probe_error, render_warning
from recsweep.storage.models import GIB, DeletionPlan, RetainedDirectory, WaveReport


@pytest.fixture
def plan(make_record, make_space) -> DeletionPlan:
    return DeletionPlan(
        volume_key="/mnt/a",
        directories=(make_record("A", 10, 1.0), make_record("B", 8, 2.0)),
        space_to_free_bytes=15 * GIB,
        space=make_space(40, volume="/mnt/a", total_gb=500),
    )


class TestRenderWarning:
    """Tests for render_warning."""

    def test_lists_volume_directories_and_delay(self, plan) -> None:
        html = render_warning([plan], 24, 50)

        assert "Volume /mnt/a" in html
        assert "40.00 GB" in html
        assert "92.00%" in html
        assert "15.00 GB" in html
        assert "/rec/A" in html
        assert "/rec/B" in html
        assert "24 hours" in html
        assert "18.00 GB" in html
        assert "50 GB" in html
        assert "Not enough recordings" not in html

    def test_shortfall_mentioned(self, make_record, make_space) -> None:
        plan = DeletionPlan(
            volume_key="/mnt/a",
            directories=(make_record("A", 5, 1.0),),
            space_to_free_bytes=15 * GIB,
            space=make_space(40, volume="/mnt/a"),
        )

        html = render_warning([plan], 1, 50)

        assert "Not enough recordings" in html
        assert "10.00 GB will still be missing" in html

    def test_paths_are_escaped(self, make_record, make_space) -> None:
        plan = DeletionPlan(
            volume_key="/mnt/a",
            directories=(make_record("<script>", 20, 1.0),),
            space_to_free_bytes=15 * GIB,
            space=make_space(40, volume="/mnt/a"),
        )

        html = render_warning([plan], 1, 50)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_zero_delay_announces_immediate_deletion(self, plan) -> None:
        html = render_warning([plan], 0, 50)

        assert "deleted <strong>now</strong>" in html
        assert "hours" not in html


class TestRenderCompletion:
    """Tests for render_completion."""

    def test_removed_and_retained_listed(self, make_record, make_space) -> None:
        report = WaveReport(
            removed=(make_record("A", 10, 1.0), make_record("C", 5, 3.0)),
            retained=(RetainedDirectory(record=make_record("B", 8, 2.0), error="Permission denied"),),
            space_after={"/mnt/a": make_space(55, volume="/mnt/a")},
        )

        html = render_completion(report)

        assert "Directories removed: <strong>2</strong>" in html
        assert "Directories retained: <strong>1</strong>" in html
        assert "15.00 GB" in html
        assert "55.00 GB" in html
        assert "could not be deleted (still on disk)" in html
        assert "Permission denied" in html
        assert "(dry run)" not in html

    def test_failed_reprobe_and_dry_run(self, make_record) -> None:
        report = WaveReport(
            removed=(make_record("A", 10, 1.0),),
            retained=(),
            space_after={"/mnt/a": None},
            dry_run=True,
        )

        html = render_completion(report)

        assert "could not be re-checked" in html
        assert "(dry run)" in html
        assert "could not be deleted" not in html


class TestRenderProbeError:
    def test_names_path_and_error(self) -> None:
        html = render_probe_error("/mnt/a/cam<1>", "Input/output error")

        assert "/mnt/a/cam&lt;1&gt;" in html
        assert "Input/output error" in html
        assert "skipped" in html
