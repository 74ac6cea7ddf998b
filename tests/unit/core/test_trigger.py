"""Unit tests for CronTrigger."""

import threading
from datetime import datetime

import pytest
from recsweep.core.trigger import CronTrigger


class TestCronTrigger:
    """Tests for schedule parsing and firing."""

    def test_invalid_expression(self) -> None:
        with pytest.raises(ValueError, match="Invalid cron expression"):
            CronTrigger("not a cron", lambda: None)

    def test_next_fire_time(self) -> None:
        """Occurrences are computed from the cron expression."""
        trigger = CronTrigger("0 */6 * * *", lambda: None)
        base = datetime(2026, 3, 1, 7, 30)

        assert trigger.next_fire_time(base) == datetime(2026, 3, 1, 12, 0)

    def test_next_fire_time_is_strictly_after_base(self) -> None:
        trigger = CronTrigger("0 12 * * *", lambda: None)
        base = datetime(2026, 3, 1, 12, 0)

        assert trigger.next_fire_time(base) == datetime(2026, 3, 2, 12, 0)

    def test_fire_runs_job(self) -> None:
        done = threading.Event()
        trigger = CronTrigger("* * * * *", done.set)

        assert trigger.fire() is True
        trigger.join(5)

        assert done.is_set()

    def test_overlapping_fire_is_skipped(self) -> None:
        """A new occurrence is skipped while the previous run is still going."""
        release = threading.Event()
        started = threading.Event()
        calls: list[int] = []

        def job() -> None:
            calls.append(1)
            started.set()
            release.wait(5)

        trigger = CronTrigger("* * * * *", job)
        assert trigger.fire() is True
        started.wait(5)

        assert trigger.fire() is False

        release.set()
        trigger.join(5)
        assert calls == [1]

    def test_job_exception_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def job() -> None:
            raise RuntimeError("boom")

        trigger = CronTrigger("* * * * *", job)
        trigger.fire()
        trigger.join(5)

        assert "Disk space check failed" in caplog.text

    def test_run_forever_fires_immediately_and_stops(self) -> None:
        """The immediate run happens before the first occurrence; stop() returns."""
        trigger: CronTrigger
        done = threading.Event()

        def job() -> None:
            done.set()
            trigger.stop()

        trigger = CronTrigger("0 0 1 1 *", job)
        runner = threading.Thread(target=trigger.run_forever, daemon=True)
        runner.start()
        runner.join(5)

        assert done.is_set()
        assert not runner.is_alive()

    def test_run_forever_without_immediate_run(self) -> None:
        calls: list[int] = []
        trigger = CronTrigger("0 0 1 1 *", lambda: calls.append(1), run_immediately=False)
        trigger.stop()

        trigger.run_forever()

        assert calls == []
