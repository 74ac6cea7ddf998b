"""Directory inventory for monitored recording roots.

Lists the immediate subdirectories of a monitored path together with
their recursive size and modification time. Size computation is
best-effort: an entry that vanishes or cannot be read mid-scan
contributes zero bytes instead of aborting the scan.
"""

import logging
import os
from pathlib import Path

from recsweep.errors import ScanError
from recsweep.storage.models import DirectoryRecord, sort_oldest_first

logger = logging.getLogger(__name__)


class DirectoryInventory:
    """Scans a monitored path for deletable recording directories.

    Only directories are reported; regular files and symlinks at the
    top level are ignored, and symlinks are never followed while
    sizing.
    """

    def scan(self, path: str | Path) -> list[DirectoryRecord]:
        """Scan a monitored path, oldest directory first.

        A missing or unreadable path yields an empty inventory.

        Args:
            path: Monitored root directory.

        Returns:
            DirectoryRecord list sorted by modification time, then path.
        """
        try:
            return self.scan_strict(path)
        except ScanError as e:
            logger.warning("%s; treating as empty inventory", e)
            return []

    def scan_strict(self, path: str | Path) -> list[DirectoryRecord]:
        """Scan a monitored path, raising if the root cannot be listed.

        Args:
            path: Monitored root directory.

        Returns:
            DirectoryRecord list sorted by modification time, then path.

        Raises:
            ScanError: If the path is missing, not a directory or unreadable.
        """
        root = Path(path)
        if not root.exists():
            raise ScanError(str(root), "path does not exist")
        if not root.is_dir():
            raise ScanError(str(root), "not a directory")

        try:
            entries = sorted(root.iterdir())
        except OSError as e:
            raise ScanError(str(root), e.strerror or str(e)) from e

        records: list[DirectoryRecord] = []
        for entry in entries:
            try:
                if entry.is_symlink() or not entry.is_dir():
                    continue
                mtime = entry.stat().st_mtime
            except OSError as e:
                logger.warning("Skipping unreadable entry %s: %s", entry, e)
                continue

            records.append(
                DirectoryRecord(
                    path=str(entry.absolute()),
                    size_bytes=self.directory_size(entry),
                    mtime=mtime,
                )
            )

        logger.debug("Scanned %s: %d directories", root, len(records))
        return sort_oldest_first(records)

    def directory_size(self, path: Path) -> int:
        """Compute the recursive size of a directory in bytes.

        Entries that cannot be statted or listed contribute zero and are
        reported as warnings.

        Args:
            path: Directory to measure.

        Returns:
            Total size of all regular files below path.
        """
        total = 0

        def _on_error(error: OSError) -> None:
            logger.warning(
                "Size of %s counted as zero: %s",
                error.filename or path,
                error.strerror or error,
            )

        for dirpath, _dirnames, filenames in os.walk(path, onerror=_on_error):
            for name in filenames:
                file_path = os.path.join(dirpath, name)
                try:
                    stat = os.lstat(file_path)
                except OSError as e:
                    _on_error(e)
                    continue
                if not os.path.islink(file_path):
                    total += stat.st_size
        return total
