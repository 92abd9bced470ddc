"""Package models shared by every backend.

This module defines the backend identifiers and the normalized package
record that all three output parsers produce.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class BackendKind(str, Enum):
    """Enumeration of supported package-manager families."""

    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"

    @property
    def family(self) -> str:
        """Return the distribution family this backend belongs to."""
        return _FAMILIES[self]


_FAMILIES: dict[BackendKind, str] = {
    BackendKind.APT: "debian",
    BackendKind.DNF: "redhat",
    BackendKind.PACMAN: "arch",
}


class ListingContext(Enum):
    """Which kind of listing a raw backend output came from.

    The same backend prints structurally different text for a search
    and for an installed-package listing.
    """

    SEARCH = "search"
    INSTALLED = "installed"


class SearchField(str, Enum):
    """Which package field a search query is matched against."""

    ALL = "all"
    NAME = "name"
    DESCRIPTION = "description"


@dataclass(frozen=True, slots=True)
class Package:
    """A package as reported by a backend.

    Attributes:
        name: Backend-canonical package identifier (never contains whitespace).
        description: Summary text, populated from search listings.
        version: Version string, populated from installed listings.
        installed: Whether the package was installed at the last reconciliation.
    """

    name: str
    description: str = ""
    version: str = ""
    installed: bool = False

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if any(ch.isspace() for ch in self.name):
            msg = f"Package name cannot contain whitespace: {self.name!r}"
            raise ValueError(msg)

    def with_installed(self, installed: bool) -> Package:
        """Return a copy with the installed flag set."""
        return replace(self, installed=installed)

    def matches(self, query: str, field: SearchField = SearchField.ALL) -> bool:
        """Check whether the query occurs in the selected field (case-insensitive)."""
        needle = query.lower()
        if field == SearchField.NAME:
            return needle in self.name.lower()
        if field == SearchField.DESCRIPTION:
            return needle in self.description.lower()
        return needle in self.name.lower() or needle in self.description.lower()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "installed": self.installed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Package:
        """Deserialize from dictionary.

        Raises:
            KeyError: If the name is missing.
            ValueError: If the name is invalid.
        """
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            version=data.get("version") or "",
            installed=bool(data.get("installed", False)),
        )
