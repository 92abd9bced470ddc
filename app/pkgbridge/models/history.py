"""History entry model for the privileged-operation audit trail.

Each install or uninstall attempt is recorded as one JSON line. Entries
hold package names and outcome only; credentials and transcripts are
never part of an entry.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pkgbridge.models.package import BackendKind


class HistoryActionType(str, Enum):
    """Type of action recorded in history."""

    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Record of a single privileged operation.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the operation finished (ISO 8601 with timezone).
        action_type: Install or uninstall.
        backend: Backend the operation ran against.
        packages: Package names passed to the backend.
        success: Whether the backend reported success.
        error_type: Error code when the operation failed.
        metadata: Additional context (invoking command, ...).
    """

    id: str
    timestamp: str
    action_type: HistoryActionType
    backend: BackendKind
    packages: tuple[str, ...]
    success: bool = True
    error_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "History entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if not self.packages:
            msg = "History entry must name at least one package"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "action_type": self.action_type.value,
            "backend": self.backend.value,
            "packages": list(self.packages),
            "success": self.success,
            "metadata": self.metadata,
        }
        if self.error_type is not None:
            result["error_type"] = self.error_type
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If action_type, backend or packages are invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            action_type=HistoryActionType(data["action_type"]),
            backend=BackendKind(data["backend"]),
            packages=tuple(data["packages"]),
            success=data.get("success", True),
            error_type=data.get("error_type"),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> HistoryEntry:
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def create_history_entry(
    action_type: HistoryActionType,
    backend: BackendKind,
    packages: list[str] | tuple[str, ...],
    *,
    success: bool = True,
    error_type: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> HistoryEntry:
    """Create a new HistoryEntry with a fresh ID and current timestamp.

    Raises:
        ValueError: If packages is empty.
    """
    if not packages:
        msg = "Cannot create history entry with no packages"
        raise ValueError(msg)

    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        action_type=action_type,
        backend=backend,
        packages=tuple(packages),
        success=success,
        error_type=error_type,
        metadata=metadata or {},
    )
