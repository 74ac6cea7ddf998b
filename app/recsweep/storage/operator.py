"""Recording directory deletion operator.

Removes whole directory trees selected by a deletion plan, with dry-run
support and per-directory failure isolation.
"""

import logging
import shutil
from pathlib import Path

from recsweep.errors import DeleteError
from recsweep.storage.models import DeletionResult

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Removes recording directories from storage.

    Attributes:
        _dry_run: If True, simulate deletions without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the DeletionExecutor.

        Args:
            dry_run: If True, report what would be deleted without deleting.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if the executor is in dry-run mode."""
        return self._dry_run

    def remove(self, path: str) -> DeletionResult:
        """Remove a single directory tree.

        Failures never propagate; they come back as an unsuccessful
        result carrying the error message.

        Args:
            path: Absolute path of the directory to remove.

        Returns:
            DeletionResult indicating success or failure.
        """
        if self._dry_run:
            logger.info("Dry-run: would delete %s", path)
            return DeletionResult(path=path, success=True, dry_run=True)

        try:
            self._remove_tree(path)
        except DeleteError as e:
            logger.error("%s", e)
            return DeletionResult(path=path, success=False, error=e.reason)

        logger.info("Deleted %s", path)
        return DeletionResult(path=path, success=True)

    def remove_all(self, paths: list[str]) -> list[DeletionResult]:
        """Remove several directories, isolating failures per path.

        Args:
            paths: Absolute directory paths to remove.

        Returns:
            List of DeletionResult, one per input path.
        """
        return [self.remove(path) for path in paths]

    @staticmethod
    def _remove_tree(path: str) -> None:
        """Delete a directory tree.

        Raises:
            DeleteError: If the path is missing, not a directory or removal fails.
        """
        target = Path(path)

        if target.is_symlink():
            raise DeleteError(path, f"Refusing to delete symlink: {path}")
        if not target.exists():
            raise DeleteError(path, f"Path does not exist: {path}")
        if not target.is_dir():
            raise DeleteError(path, f"Not a directory: {path}")

        try:
            shutil.rmtree(target)
        except OSError as e:
            raise DeleteError(path, str(e)) from e
