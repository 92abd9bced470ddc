"""Unit tests for history models."""

import json

import pytest
from pkgbridge.models.history import HistoryActionType, HistoryEntry, create_history_entry
from pkgbridge.models.package import BackendKind


class TestCreateHistoryEntry:
    """Tests for create_history_entry."""

    def test_fields(self) -> None:
        """A fresh entry has an id, a UTC timestamp and the given data."""
        entry = create_history_entry(
            HistoryActionType.UNINSTALL,
            BackendKind.DNF,
            ["htop", "btop"],
            success=False,
            error_type="privilege_denied",
        )
        assert len(entry.id) == 12
        assert entry.timestamp.endswith("+00:00")
        assert entry.packages == ("htop", "btop")
        assert entry.error_type == "privilege_denied"

    def test_requires_packages(self) -> None:
        """An entry without packages is rejected."""
        with pytest.raises(ValueError):
            create_history_entry(HistoryActionType.INSTALL, BackendKind.APT, [])


class TestSerialization:
    """Tests for JSON line serialization."""

    def test_json_line_round_trip(self) -> None:
        """A JSON line reads back as the same entry."""
        entry = create_history_entry(HistoryActionType.INSTALL, BackendKind.APT, ["vim"])
        line = entry.to_json_line()
        assert "\n" not in line
        assert HistoryEntry.from_json_line(line) == entry

    def test_error_type_omitted_on_success(self) -> None:
        """Successful entries have no error_type key."""
        entry = create_history_entry(HistoryActionType.INSTALL, BackendKind.APT, ["vim"])
        assert "error_type" not in json.loads(entry.to_json_line())

    def test_unknown_backend_rejected(self) -> None:
        """Unknown backends fail to load."""
        data = create_history_entry(HistoryActionType.INSTALL, BackendKind.APT, ["vim"]).to_dict()
        data["backend"] = "zypper"
        with pytest.raises(ValueError):
            HistoryEntry.from_dict(data)
