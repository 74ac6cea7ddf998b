"""Per-volume consolidation of deletion candidates.

Monitored paths that live on the same volume share one free-space
deficit. Their individual selections are pooled, re-sorted oldest-first
and re-selected against the volume-level deficit, so two paths on one
disk never both delete enough to cover the whole disk's shortfall.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from recsweep.core.selector import compute_space_to_free, take_prefix
from recsweep.storage.models import (
    DeletionPlan,
    DirectoryRecord,
    PathEvaluation,
    SpaceInfo,
    VolumeKey,
    bytes_to_gb,
)

logger = logging.getLogger(__name__)


def group_by_volume(
    evaluations: Iterable[PathEvaluation],
) -> dict[VolumeKey, list[PathEvaluation]]:
    """Group successful evaluations by volume key.

    Failed evaluations (probe errors) are dropped.

    Args:
        evaluations: Per-path evaluation results.

    Returns:
        Mapping of volume key to the evaluations on that volume.
    """
    groups: dict[VolumeKey, list[PathEvaluation]] = defaultdict(list)
    for evaluation in evaluations:
        if evaluation.failed or evaluation.volume_key is None or evaluation.space is None:
            continue
        groups[evaluation.volume_key].append(evaluation)
    return dict(groups)


def _pool_candidates(evaluations: list[PathEvaluation]) -> list[DirectoryRecord]:
    """Merge candidates of several paths, keeping one record per directory."""
    pool: dict[str, DirectoryRecord] = {}
    for evaluation in evaluations:
        for record in evaluation.candidates:
            pool.setdefault(record.path, record)
    return list(pool.values())


def consolidate_volume(
    volume_key: VolumeKey,
    space: SpaceInfo,
    evaluations: list[PathEvaluation],
    min_free_bytes: int,
    buffer_percent: float,
) -> DeletionPlan | None:
    """Build the deletion plan for a single volume.

    Args:
        volume_key: Volume being consolidated.
        space: The volume's single space snapshot for this cycle.
        evaluations: Evaluations of every monitored path on the volume.
        min_free_bytes: Minimum free bytes the volume must keep.
        buffer_percent: Extra margin on top of the minimum, in percent.

    Returns:
        DeletionPlan, or None when nothing needs deleting.
    """
    space_to_free = compute_space_to_free(space.free_bytes, min_free_bytes, buffer_percent)
    if space_to_free <= 0:
        return None

    pool = _pool_candidates(evaluations)
    if not pool:
        return None

    selected = take_prefix(pool, space_to_free)

    plan = DeletionPlan(
        volume_key=volume_key,
        directories=tuple(selected),
        space_to_free_bytes=space_to_free,
        space=space,
    )
    logger.info(
        "Volume %s: %d directories (%.2fGB) selected across %d path(s) to free %.2fGB",
        volume_key,
        len(plan.directories),
        bytes_to_gb(plan.total_bytes),
        len(evaluations),
        bytes_to_gb(space_to_free),
    )
    return plan


def consolidate(
    evaluations: Iterable[PathEvaluation],
    min_free_bytes: int,
    buffer_percent: float,
) -> list[DeletionPlan]:
    """Merge per-path evaluations into one deletion plan per volume.

    Volumes whose final selection is empty produce no plan.

    Args:
        evaluations: Per-path evaluation results from one cycle.
        min_free_bytes: Minimum free bytes each volume must keep.
        buffer_percent: Extra margin on top of the minimum, in percent.

    Returns:
        Non-empty DeletionPlans, ordered by volume key.
    """
    plans: list[DeletionPlan] = []
    for volume_key, group in sorted(group_by_volume(evaluations).items()):
        # Every evaluation in a group carries the same cached snapshot.
        space = group[0].space
        if space is None:
            continue
        plan = consolidate_volume(volume_key, space, group, min_free_bytes, buffer_percent)
        if plan is not None:
            plans.append(plan)
    return plans
