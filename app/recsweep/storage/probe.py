"""Volume space probing.

Resolves the physical volume behind a monitored path and queries its
capacity and free space. The probe keeps no state: every call hits the
filesystem, and callers are expected to cache one snapshot per volume
for the duration of a single evaluation cycle.
"""

import logging
import os
import shutil
from pathlib import Path

from recsweep.errors import ProbeError
from recsweep.storage.models import SpaceInfo, VolumeKey

logger = logging.getLogger(__name__)


def _existing_ancestor(path: Path) -> Path:
    """Walk up from path to the first component that exists."""
    current = path
    while not current.exists() and current.parent != current:
        current = current.parent
    return current


def resolve_volume(path: str | Path) -> VolumeKey:
    """Resolve the volume key (mount point or drive anchor) for a path.

    Non-existent trailing components are skipped, so a monitored path
    that has not been created yet still maps to the volume that will
    hold it.

    Args:
        path: Any filesystem path.

    Returns:
        Mount point on POSIX systems, drive anchor (e.g. "E:\\") on Windows.
    """
    resolved = Path(os.path.abspath(path))

    if os.name == "nt":
        return resolved.anchor

    current = _existing_ancestor(resolved)
    while not os.path.ismount(current) and current.parent != current:
        current = current.parent
    return str(current)


class VolumeSpaceProbe:
    """Queries free and total bytes of the volume underlying a path."""

    def probe(self, path: str | Path) -> SpaceInfo:
        """Take a live space snapshot of the volume holding path.

        Args:
            path: Monitored path (need not exist itself).

        Returns:
            SpaceInfo for the volume.

        Raises:
            ProbeError: If the volume cannot be statted.
        """
        try:
            volume = resolve_volume(path)
            usage = shutil.disk_usage(volume)
        except OSError as e:
            raise ProbeError(str(path), e.strerror or str(e)) from e

        info = SpaceInfo(volume_key=volume, total_bytes=usage.total, free_bytes=usage.free)
        logger.debug(
            "Probed %s (volume %s): total=%.2fGB free=%.2fGB",
            path,
            volume,
            info.total_gb,
            info.free_gb,
        )
        return info
