"""Cron-driven periodic trigger for evaluation cycles.

Fires a job once at start-up and then at every occurrence of a
five-field cron expression (local time). Each run happens on its own
daemon thread so a slow cycle never delays the schedule; a run that is
still in progress when the next occurrence arrives causes that
occurrence to be skipped.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from croniter import croniter

logger = logging.getLogger(__name__)


class CronTrigger:
    """Runs a job on a cron schedule until stopped.

    Args:
        expression: Five-field cron expression.
        job: Callable invoked for each occurrence.
        run_immediately: Also run the job once when the trigger starts.

    Raises:
        ValueError: If the expression is not a valid cron expression.
    """

    def __init__(
        self,
        expression: str,
        job: Callable[[], object],
        *,
        run_immediately: bool = True,
    ) -> None:
        if not croniter.is_valid(expression):
            msg = f"Invalid cron expression: '{expression}'"
            raise ValueError(msg)
        self._expression = expression
        self._job = job
        self._run_immediately = run_immediately
        self._stop = threading.Event()
        self._worker: threading.Thread | None = None

    @property
    def expression(self) -> str:
        return self._expression

    def next_fire_time(self, base: datetime | None = None) -> datetime:
        """Next occurrence of the schedule strictly after base (default: now)."""
        start = base or datetime.now().astimezone()
        return croniter(self._expression, start).get_next(datetime)

    def fire(self) -> bool:
        """Start one run of the job in the background.

        Returns:
            True if a run was started, False if the previous one is still going.
        """
        if self._worker is not None and self._worker.is_alive():
            logger.warning("Previous check still running; skipping this occurrence")
            return False

        self._worker = threading.Thread(target=self._run_job, name="recsweep-cycle", daemon=True)
        self._worker.start()
        return True

    def run_forever(self) -> None:
        """Block, firing the job on schedule until stop() is called."""
        logger.info("Starting schedule: %s", self._expression)
        if self._run_immediately:
            logger.info("Running an immediate disk space check")
            self.fire()

        while not self._stop.is_set():
            now = datetime.now().astimezone()
            next_time = self.next_fire_time(now)
            delay = max((next_time - now).total_seconds(), 0.0)
            logger.debug("Next check at %s", next_time.isoformat())
            if self._stop.wait(delay):
                break
            self.fire()

        logger.info("Schedule stopped")

    def stop(self) -> None:
        """Ask run_forever() to return."""
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the current job run, if any, to finish."""
        if self._worker is not None:
            self._worker.join(timeout)

    def _run_job(self) -> None:
        try:
            self._job()
        except Exception:
            logger.exception("Disk space check failed")
