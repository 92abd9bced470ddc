"""Unit tests for StateManager.

Tests for the StateManager class that handles history persistence.
"""

import logging
from pathlib import Path

import pytest
from pkgbridge.core.state import StateManager
from pkgbridge.models.history import HistoryActionType, HistoryEntry, create_history_entry
from pkgbridge.models.package import BackendKind


@pytest.fixture
def manager(tmp_path: Path) -> StateManager:
    """Create a StateManager with temporary directory."""
    return StateManager(state_dir=tmp_path / "state")


def _entry(name: str, success: bool = True) -> HistoryEntry:
    return create_history_entry(
        HistoryActionType.INSTALL,
        BackendKind.APT,
        [name],
        success=success,
    )


class TestStateManager:
    """Tests for recording and reading history."""

    def test_history_path(self, tmp_path: Path) -> None:
        """history_path is inside the state directory."""
        assert StateManager(state_dir=tmp_path).history_path == tmp_path / "history.jsonl"

    def test_empty_when_missing(self, manager: StateManager) -> None:
        """No file means no history."""
        assert manager.get_history() == []

    def test_record_creates_directory(self, manager: StateManager) -> None:
        """The state directory is created on first write."""
        manager.record(_entry("vim"))
        assert manager.history_path.exists()

    def test_newest_first_and_limit(self, manager: StateManager) -> None:
        """Entries come back newest first, limited on request."""
        for name in ("a", "b", "c"):
            manager.record(_entry(name))

        assert [e.packages[0] for e in manager.get_history()] == ["c", "b", "a"]
        assert [e.packages[0] for e in manager.get_history(limit=2)] == ["c", "b"]

    def test_one_line_per_entry(self, manager: StateManager) -> None:
        """Each record appends exactly one JSON line."""
        manager.record(_entry("a"))
        manager.record(_entry("b", success=False))
        assert len(manager.history_path.read_text().splitlines()) == 2

    def test_corrupt_lines_skipped(
        self, manager: StateManager, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Corrupt lines are skipped with a warning."""
        manager.record(_entry("good"))
        with manager.history_path.open("a") as f:
            f.write("{not json\n")
            f.write('{"id": "x"}\n')

        with caplog.at_level(logging.WARNING, logger="pkgbridge.core.state"):
            entries = manager.get_history()

        assert [e.packages[0] for e in entries] == ["good"]
        assert "Skipping corrupt history line" in caplog.text
