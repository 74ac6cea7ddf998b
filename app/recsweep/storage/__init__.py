"""Storage access: volume probing, directory inventory and deletion.

This package holds the filesystem-facing collaborators of the
evaluation cycle and the data models they produce.
"""

from recsweep.storage.inventory import DirectoryInventory
from recsweep.storage.models import (
    DeletionPlan,
    DeletionResult,
    DirectoryRecord,
    PathEvaluation,
    RetainedDirectory,
    SpaceInfo,
    VolumeKey,
    WaveReport,
)
from recsweep.storage.operator import DeletionExecutor
from recsweep.storage.probe import VolumeSpaceProbe, resolve_volume

__all__ = [
    "DeletionExecutor",
    "DeletionPlan",
    "DeletionResult",
    "DirectoryInventory",
    "DirectoryRecord",
    "PathEvaluation",
    "RetainedDirectory",
    "SpaceInfo",
    "VolumeKey",
    "VolumeSpaceProbe",
    "WaveReport",
    "resolve_volume",
]
