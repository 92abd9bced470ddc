"""History persistence for privileged operations.

This module provides the StateManager class for appending and reading
history entries in a JSONL file.
"""

import json
import logging
from pathlib import Path

from pkgbridge.core.paths import ensure_dir, get_state_dir
from pkgbridge.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class StateManager:
    """Manages the operation history in a JSONL file.

    Storage location: ~/.local/state/pkgbridge/history.jsonl

    Each line is a complete JSON object representing a HistoryEntry, so
    writes are append-only.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/pkgbridge
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to the history.jsonl file."""
        return self._state_dir / self.HISTORY_FILENAME

    def record(self, entry: HistoryEntry) -> None:
        """Append an entry to the history file.

        Args:
            entry: The history entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        ensure_dir(self._state_dir, "state")

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read history entries, newest first.

        Corrupt lines are skipped with a warning.

        Args:
            limit: Maximum number of entries to return (None = all).

        Returns:
            List of HistoryEntry, newest first. Empty if the file doesn't exist.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, str(e))
                    continue

        entries.reverse()

        if limit is not None:
            return entries[:limit]
        return entries
