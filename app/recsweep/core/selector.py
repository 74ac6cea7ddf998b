"""Oldest-first deletion selection.

Given the free space of a volume, a minimum-free threshold and a buffer
percentage, pick the shortest oldest-first prefix of an inventory whose
cumulative size closes the gap to the buffered target.
"""

import logging
from collections.abc import Iterable

from recsweep.storage.models import DirectoryRecord, bytes_to_gb, sort_oldest_first

logger = logging.getLogger(__name__)


def target_free_bytes(min_free_bytes: int, buffer_percent: float) -> int:
    """Buffered free-space target: min_free * (1 + buffer/100)."""
    return round(min_free_bytes * (100 + buffer_percent) / 100)


def compute_space_to_free(
    current_free_bytes: int, min_free_bytes: int, buffer_percent: float
) -> int:
    """Compute the deficit between the buffered target and current free space.

    Args:
        current_free_bytes: Free bytes on the volume right now.
        min_free_bytes: Minimum free bytes the volume must keep.
        buffer_percent: Extra margin on top of the minimum, in percent.

    Returns:
        Bytes to free; zero or negative means nothing needs deleting.
    """
    return target_free_bytes(min_free_bytes, buffer_percent) - current_free_bytes


def take_prefix(records: Iterable[DirectoryRecord], space_to_free: int) -> list[DirectoryRecord]:
    """Take records oldest-first until their total reaches space_to_free.

    Stops at the first record that crosses the threshold. When the
    records run out first, everything is returned.

    Args:
        records: Candidate directories, in any order.
        space_to_free: Bytes to reclaim.

    Returns:
        Selected records, oldest first.
    """
    if space_to_free <= 0:
        return []

    selected: list[DirectoryRecord] = []
    total = 0
    for record in sort_oldest_first(list(records)):
        selected.append(record)
        total += record.size_bytes
        if total >= space_to_free:
            return selected

    if selected:
        logger.warning(
            "Insufficient reclaimable space: %d directories hold %.2fGB, %.2fGB needed",
            len(selected),
            bytes_to_gb(total),
            bytes_to_gb(space_to_free),
        )
    else:
        logger.warning(
            "Insufficient reclaimable space: no directories available, %.2fGB needed",
            bytes_to_gb(space_to_free),
        )
    return selected


def select_directories(
    inventory: Iterable[DirectoryRecord],
    current_free_bytes: int,
    min_free_bytes: int,
    buffer_percent: float,
) -> list[DirectoryRecord]:
    """Select the minimal oldest-first set of directories to delete.

    Args:
        inventory: Directories available for deletion.
        current_free_bytes: Free bytes on the volume right now.
        min_free_bytes: Minimum free bytes the volume must keep.
        buffer_percent: Extra margin on top of the minimum, in percent.

    Returns:
        Directories to delete, oldest first; empty when no deficit exists.
    """
    space_to_free = compute_space_to_free(current_free_bytes, min_free_bytes, buffer_percent)
    if space_to_free <= 0:
        return []

    logger.info(
        "Need to free %.2fGB to reach %.2fGB free",
        bytes_to_gb(space_to_free),
        bytes_to_gb(target_free_bytes(min_free_bytes, buffer_percent)),
    )
    return take_prefix(inventory, space_to_free)
