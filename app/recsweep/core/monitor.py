"""Evaluation cycle: probe, scan, select, consolidate, schedule.

One call to SpaceMonitor.run_cycle() is one evaluation pass over every
monitored path. Each distinct volume is probed once per cycle, paths
are scanned concurrently, and the per-path selections are consolidated
per volume before a deletion wave is handed to the scheduler.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from recsweep.core.config import SweepConfig
from recsweep.core.consolidator import consolidate
from recsweep.core.scheduler import DeletionScheduler
from recsweep.core.selector import select_directories
from recsweep.core.state import StateManager
from recsweep.errors import ProbeError
from recsweep.notify import create_notifier
from recsweep.notify.base import NotificationSink
from recsweep.notify.templates import (
    PROBE_ERROR_SUBJECT,
    WARNING_SUBJECT,
    render_probe_error,
    render_warning,
)
from recsweep.storage.inventory import DirectoryInventory
from recsweep.storage.models import DeletionPlan, PathEvaluation, SpaceInfo, VolumeKey, bytes_to_gb
from recsweep.storage.operator import DeletionExecutor
from recsweep.storage.probe import VolumeSpaceProbe, resolve_volume

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CycleReport:
    """Outcome of one evaluation cycle.

    Attributes:
        evaluations: Per-path results (empty when the cycle was skipped).
        plans: Consolidated per-volume deletion plans.
        scheduled: Whether a deletion wave was armed by this cycle.
        skipped: Whether the cycle short-circuited because a wave was pending.
    """

    evaluations: tuple[PathEvaluation, ...] = ()
    plans: tuple[DeletionPlan, ...] = ()
    scheduled: bool = False
    skipped: bool = False


class SpaceMonitor:
    """Evaluates monitored paths and hands deletion plans to the scheduler.

    Args:
        paths: Monitored recording roots.
        min_free_bytes: Free space each volume must keep.
        buffer_percent: Extra margin freed on top of the threshold.
        delay_hours: Delay announced in the warning report.
        scheduler: Owner of the run state and deferred execution.
        notifier: Receives probe error reports and immediate-sweep warnings.
        probe: Volume space probe.
        inventory: Directory inventory scanner.
        max_workers: Threads used for probing and scanning.
    """

    def __init__(
        self,
        paths: Sequence[str | Path],
        min_free_bytes: int,
        buffer_percent: float,
        delay_hours: float,
        scheduler: DeletionScheduler,
        notifier: NotificationSink,
        *,
        probe: VolumeSpaceProbe | None = None,
        inventory: DirectoryInventory | None = None,
        max_workers: int = 4,
    ) -> None:
        self._paths = [str(p) for p in paths]
        self._min_free_bytes = min_free_bytes
        self._buffer_percent = buffer_percent
        self._delay_hours = delay_hours
        self._scheduler = scheduler
        self._notifier = notifier
        self._probe = probe or VolumeSpaceProbe()
        self._inventory = inventory or DirectoryInventory()
        self._max_workers = max_workers

    @property
    def scheduler(self) -> DeletionScheduler:
        return self._scheduler

    def run_cycle(self, *, plan_only: bool = False) -> CycleReport:
        """Run one evaluation cycle.

        Args:
            plan_only: Compute plans without notifying or scheduling.

        Returns:
            CycleReport describing what was evaluated and scheduled.
        """
        if not plan_only and self._scheduler.is_running:
            logger.info("Deletion wave pending; skipping disk space check")
            return CycleReport(skipped=True)

        logger.info("Checking disk space for %d path(s)", len(self._paths))
        evaluations = self.evaluate()

        if not plan_only:
            self.report_probe_errors(evaluations)

        plans = consolidate(evaluations, self._min_free_bytes, self._buffer_percent)
        if not plans:
            logger.info("Disk space sufficient, nothing to delete")
            return CycleReport(evaluations=tuple(evaluations))

        if plan_only:
            return CycleReport(evaluations=tuple(evaluations), plans=tuple(plans))

        scheduled = self._scheduler.try_schedule(plans, self.render_warning(plans))
        return CycleReport(evaluations=tuple(evaluations), plans=tuple(plans), scheduled=scheduled)

    def evaluate(self) -> list[PathEvaluation]:
        """Probe each volume once, then scan and select per path concurrently.

        Returns:
            One PathEvaluation per monitored path, in configured order.
        """
        volumes: dict[str, VolumeKey | None] = {}
        for path in self._paths:
            try:
                volumes[path] = resolve_volume(path)
            except OSError as e:
                logger.error("Cannot resolve volume of %s: %s", path, e)
                volumes[path] = None

        # Scoped to this cycle: disk state changes between cycles.
        spaces: dict[VolumeKey, SpaceInfo] = {}
        errors: dict[VolumeKey, str] = {}
        distinct = sorted({v for v in volumes.values() if v is not None})

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            for volume, outcome in zip(distinct, pool.map(self._safe_probe, distinct), strict=True):
                if isinstance(outcome, SpaceInfo):
                    spaces[volume] = outcome
                    logger.info(
                        "Volume %s: total %.2fGB, free %.2fGB",
                        volume,
                        outcome.total_gb,
                        outcome.free_gb,
                    )
                else:
                    errors[volume] = outcome

            return list(
                pool.map(
                    lambda p: self._evaluate_path(p, volumes[p], spaces, errors),
                    self._paths,
                )
            )

    def _safe_probe(self, volume: VolumeKey) -> SpaceInfo | str:
        try:
            return self._probe.probe(volume)
        except ProbeError as e:
            logger.error("%s", e)
            return str(e)

    def _evaluate_path(
        self,
        path: str,
        volume: VolumeKey | None,
        spaces: dict[VolumeKey, SpaceInfo],
        errors: dict[VolumeKey, str],
    ) -> PathEvaluation:
        if volume is None:
            return PathEvaluation(path=path, volume_key=None, space=None, error="volume not found")
        if volume in errors:
            return PathEvaluation(path=path, volume_key=volume, space=None, error=errors[volume])

        space = spaces[volume]
        if space.free_bytes >= self._min_free_bytes:
            return PathEvaluation(path=path, volume_key=volume, space=space)

        logger.warning(
            "Free space %.2fGB on %s is below the %.2fGB threshold",
            space.free_gb,
            path,
            bytes_to_gb(self._min_free_bytes),
        )
        candidates = select_directories(
            self._inventory.scan(path),
            space.free_bytes,
            self._min_free_bytes,
            self._buffer_percent,
        )
        return PathEvaluation(
            path=path, volume_key=volume, space=space, candidates=tuple(candidates)
        )

    def render_warning(self, plans: list[DeletionPlan], delay_hours: float | None = None) -> str:
        """Render the pre-deletion warning; delay_hours defaults to the configured delay."""
        delay = self._delay_hours if delay_hours is None else delay_hours
        return render_warning(plans, delay, bytes_to_gb(self._min_free_bytes))

    def warn_immediate(self, plans: list[DeletionPlan]) -> None:
        """Send the warning for a wave that runs right away."""
        self._notifier.safe_send(WARNING_SUBJECT, self.render_warning(plans, delay_hours=0))

    def report_probe_errors(self, evaluations: Sequence[PathEvaluation]) -> None:
        """Send one error report per path that could not be checked."""
        for evaluation in evaluations:
            if evaluation.error is not None:
                self._notifier.safe_send(
                    PROBE_ERROR_SUBJECT,
                    render_probe_error(evaluation.path, evaluation.error),
                )


def create_monitor(config: SweepConfig, *, dry_run: bool | None = None) -> SpaceMonitor:
    """Wire a SpaceMonitor and its collaborators from configuration.

    Args:
        config: Service configuration.
        dry_run: Overrides config.dry_run when not None.

    Returns:
        Ready-to-run SpaceMonitor.
    """
    notifier = create_notifier(config)
    probe = VolumeSpaceProbe()
    executor = DeletionExecutor(dry_run=config.dry_run if dry_run is None else dry_run)
    scheduler = DeletionScheduler(
        executor,
        probe,
        notifier,
        config.delete_delay_seconds,
        state_manager=StateManager(),
    )
    return SpaceMonitor(
        config.recordings_paths,
        config.min_free_bytes,
        config.buffer_percentage,
        config.delete_delay_hours,
        scheduler,
        notifier,
        probe=probe,
        max_workers=config.max_workers,
    )
