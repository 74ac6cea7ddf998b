"""Deferred, single-flight execution of deletion waves.

The scheduler owns the run state: from the moment a wave is warned
about until its completion report is sent, no other wave can be armed.
A wave runs on a one-shot timer thread after the configured delay,
removes every planned directory (tolerating per-directory failures),
re-probes the affected volumes and reports the outcome.
"""

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum

from recsweep.core.state import StateManager
from recsweep.errors import ProbeError
from recsweep.models.history import entry_from_report
from recsweep.notify.base import NotificationSink
from recsweep.notify.templates import COMPLETION_SUBJECT, WARNING_SUBJECT, render_completion
from recsweep.storage.models import (
    DeletionPlan,
    DirectoryRecord,
    RetainedDirectory,
    SpaceInfo,
    VolumeKey,
    WaveReport,
    bytes_to_gb,
)
from recsweep.storage.operator import DeletionExecutor
from recsweep.storage.probe import VolumeSpaceProbe

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


def _default_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class WaveState(str, Enum):
    """Lifecycle state of the current deletion wave.

    Attributes:
        IDLE: No wave armed; new cycles may schedule one.
        WARNED: Warning sent, deferred execution armed.
        EXECUTING: Directories are being removed and reported.
    """

    IDLE = "idle"
    WARNED = "warned"
    EXECUTING = "executing"


class DeletionScheduler:
    """Arms and runs at most one deletion wave at a time.

    The guard is process-wide rather than per volume: while any wave
    is armed or executing, every new scheduling attempt is a no-op.

    Args:
        executor: Removes directories.
        probe: Re-queries volume space after the wave.
        notifier: Receives the warning and completion reports.
        delay_seconds: Time between the warning and the deletion.
        state_manager: Optional history store for executed waves.
        timer_factory: Builds the one-shot timer (injectable for tests).
    """

    def __init__(
        self,
        executor: DeletionExecutor,
        probe: VolumeSpaceProbe,
        notifier: NotificationSink,
        delay_seconds: float,
        *,
        state_manager: StateManager | None = None,
        timer_factory: TimerFactory = _default_timer,
    ) -> None:
        self._executor = executor
        self._probe = probe
        self._notifier = notifier
        self._delay_seconds = delay_seconds
        self._state_manager = state_manager
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._state = WaveState.IDLE
        self._timer: threading.Timer | None = None
        self._idle = threading.Event()
        self._idle.set()
        self._last_report: WaveReport | None = None

    @property
    def state(self) -> WaveState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        """Whether a wave is armed or in flight."""
        return self.state != WaveState.IDLE

    @property
    def last_report(self) -> WaveReport | None:
        """Report of the most recently completed wave."""
        return self._last_report

    def try_schedule(self, plans: list[DeletionPlan], warning_html: str) -> bool:
        """Warn about and arm a deferred deletion wave.

        Args:
            plans: Consolidated plans to execute after the delay.
            warning_html: Pre-rendered warning report.

        Returns:
            True if a wave was armed, False if there was nothing to do
            or another wave is already armed or running.
        """
        if not plans:
            logger.debug("No deletion plans; nothing to schedule")
            return False

        if not self._acquire(WaveState.WARNED):
            logger.info("A deletion wave is already scheduled; not scheduling another")
            return False

        try:
            self._notifier.safe_send(WARNING_SUBJECT, warning_html)

            with self._lock:
                if self._state != WaveState.WARNED:
                    # Cancelled while the warning was being sent.
                    return False
                self._timer = self._timer_factory(
                    self._delay_seconds, lambda: self._run_deferred(plans)
                )
                self._timer.start()
        except BaseException:
            # Nothing armed; release the guard.
            self._release()
            raise

        logger.info(
            "Deletion of %d directories scheduled in %.2f hours",
            sum(len(p.directories) for p in plans),
            self._delay_seconds / 3600,
        )
        return True

    def execute_now(self, plans: list[DeletionPlan]) -> WaveReport | None:
        """Run a deletion wave synchronously, bypassing the delay.

        Args:
            plans: Consolidated plans to execute.

        Returns:
            WaveReport, or None if there was nothing to do or another
            wave is armed or running.
        """
        if not plans:
            return None
        if not self._acquire(WaveState.EXECUTING):
            logger.info("A deletion wave is already scheduled; not running another")
            return None
        return self._run_wave(plans)

    def cancel(self) -> bool:
        """Cancel an armed wave that has not started executing.

        Returns:
            True if a pending wave was cancelled.
        """
        with self._lock:
            if self._state != WaveState.WARNED:
                return False
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._state = WaveState.IDLE
            self._idle.set()

        logger.info("Pending deletion wave cancelled")
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no wave is armed or running.

        Returns:
            True if idle, False if the timeout expired first.
        """
        return self._idle.wait(timeout)

    def _acquire(self, state: WaveState) -> bool:
        """Atomically move from IDLE to state."""
        with self._lock:
            if self._state != WaveState.IDLE:
                return False
            self._state = state
            self._idle.clear()
            return True

    def _run_deferred(self, plans: list[DeletionPlan]) -> None:
        """Timer thread entry point."""
        with self._lock:
            if self._state != WaveState.WARNED:
                return
            self._state = WaveState.EXECUTING
            self._timer = None

        try:
            self._run_wave(plans)
        except Exception:
            logger.exception("Deletion wave failed")

    def _run_wave(self, plans: list[DeletionPlan]) -> WaveReport:
        """Execute, re-probe, report and release the run state."""
        try:
            report = self._execute(plans)
            self._last_report = report
            logger.info(
                "Deletion wave finished: %d removed (%.2fGB), %d retained",
                len(report.removed),
                bytes_to_gb(report.freed_bytes),
                len(report.retained),
            )
            self._notifier.safe_send(COMPLETION_SUBJECT, render_completion(report))
            self._record(report)
            return report
        finally:
            self._release()

    def _release(self) -> None:
        """Return to IDLE and wake waiters."""
        with self._lock:
            self._state = WaveState.IDLE
            self._timer = None
            self._idle.set()

    def _execute(self, plans: list[DeletionPlan]) -> WaveReport:
        started_at = datetime.now(UTC).isoformat()
        removed: list[DirectoryRecord] = []
        retained: list[RetainedDirectory] = []

        for plan in plans:
            for record in plan.directories:
                result = self._executor.remove(record.path)
                if result.success:
                    removed.append(record)
                else:
                    error = result.error or "Unknown error"
                    retained.append(RetainedDirectory(record=record, error=error))

        space_after: dict[VolumeKey, SpaceInfo | None] = {}
        for plan in plans:
            try:
                space = self._probe.probe(plan.volume_key)
            except ProbeError as e:
                logger.error("Re-checking %s after deletion failed: %s", plan.volume_key, e)
                space_after[plan.volume_key] = None
                continue
            space_after[plan.volume_key] = space
            logger.info("Free space on %s after deletion: %.2fGB", plan.volume_key, space.free_gb)

        return WaveReport(
            removed=tuple(removed),
            retained=tuple(retained),
            space_after=space_after,
            started_at=started_at,
            finished_at=datetime.now(UTC).isoformat(),
            dry_run=self._executor.dry_run,
        )

    def _record(self, report: WaveReport) -> None:
        """Append the wave to history; failures are only logged."""
        if self._state_manager is None or not (report.removed or report.retained):
            return
        try:
            self._state_manager.record_wave(entry_from_report(report))
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning("Failed to record deletion wave to history: %s", str(e))
