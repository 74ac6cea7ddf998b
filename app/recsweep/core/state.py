"""Deletion wave history on disk.

Every wave that removed or retained at least one recording directory
is appended as one JSON line to ``history.jsonl`` in the XDG state
directory. The file is never rewritten; readers skip lines they cannot
parse so a torn write only costs that one wave.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from recsweep.core.paths import ensure_state_dir, get_history_path
from recsweep.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class StateManager:
    """Append-only store of past deletion waves.

    Args:
        state_dir: Directory holding history.jsonl. Defaults to
            $XDG_STATE_HOME/recsweep.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        self._state_dir = state_dir

    @property
    def history_path(self) -> Path:
        if self._state_dir is None:
            return get_history_path()
        return self._state_dir / self.HISTORY_FILENAME

    def record_wave(self, entry: HistoryEntry) -> None:
        """Append one wave to the history file, creating it if needed.

        Raises:
            RuntimeError: If the default state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir is None:
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")

        logger.debug("Recorded wave %s (%d items)", entry.id, len(entry.items))

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Return recorded waves, newest first, at most limit of them."""
        entries = list(self._read_entries())
        entries.reverse()
        return entries if limit is None else entries[:limit]

    def _read_entries(self) -> Iterator[HistoryEntry]:
        path = self.history_path
        if not path.exists():
            return

        with path.open(encoding="utf-8") as f:
            for line_num, raw in enumerate(f, start=1):
                line = raw.strip()
                if not line:
                    continue
                try:
                    yield HistoryEntry.from_json_line(line)
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, e)
