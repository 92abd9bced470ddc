"""Request and result models for the operation boundary.

These are the messages exchanged between a user interface and the core.
Both sides only ever see plain dictionaries on the wire, produced by
:meth:`OperationResult.to_dict` and consumed by :meth:`OperationRequest.from_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pkgbridge.models.package import BackendKind, Package, SearchField

if TYPE_CHECKING:
    from pkgbridge.core.errors import PkgBridgeError


class OperationKind(str, Enum):
    """Logical operations exposed by the core."""

    SEARCH = "search"
    LIST_INSTALLED = "list_installed"
    CHECK_INSTALLED = "check_installed"
    CHECK_UNINSTALL = "check_uninstall"
    INSTALL = "install"
    UNINSTALL = "uninstall"

    @property
    def is_privileged(self) -> bool:
        """Check if the operation mutates the system and needs a credential."""
        return self in (OperationKind.INSTALL, OperationKind.UNINSTALL)


@dataclass(frozen=True, slots=True)
class OperationRequest:
    """A single logical request.

    Attributes:
        kind: Operation to perform.
        query: Search query (search only).
        names: Package names (check/install/uninstall).
        credential: Administrative password (install/uninstall only).
        search_field: Field the search query is matched against.
    """

    kind: OperationKind
    query: str | None = None
    names: tuple[str, ...] = ()
    credential: str | None = field(default=None, repr=False)
    search_field: SearchField = SearchField.ALL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OperationRequest:
        """Deserialize a request message.

        Raises:
            KeyError: If the operation is missing.
            ValueError: If the operation or search field is unknown.
            TypeError: If names is not a list of strings.
        """
        raw_names = data.get("names") or []
        if isinstance(raw_names, str) or not all(isinstance(n, str) for n in raw_names):
            msg = "names must be a list of strings"
            raise TypeError(msg)

        return cls(
            kind=OperationKind(data["operation"]),
            query=data.get("query"),
            names=tuple(raw_names),
            credential=data.get("credential"),
            search_field=SearchField(data.get("search_field") or SearchField.ALL.value),
        )


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Tagged success/failure outcome of an operation.

    Attributes:
        kind: Operation that produced this result.
        success: Whether the operation succeeded.
        backend: Backend the operation ran against, if one was resolved.
        packages: Parsed packages (search and list-installed).
        installed_names: Names confirmed installed (check-installed).
        text: Advisory text (check-uninstall) or transcript (install/uninstall).
        error: Human-readable error description on failure.
        error_type: Stable error code on failure.
    """

    kind: OperationKind
    success: bool
    backend: BackendKind | None = None
    packages: tuple[Package, ...] = ()
    installed_names: tuple[str, ...] = ()
    text: str | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return not self.success

    @classmethod
    def failure(
        cls,
        kind: OperationKind,
        error: PkgBridgeError,
        *,
        backend: BackendKind | None = None,
        text: str | None = None,
    ) -> OperationResult:
        """Build a failure result from a pkgbridge exception."""
        return cls(
            kind=kind,
            success=False,
            backend=backend,
            text=text,
            error=str(error),
            error_type=error.error_type,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the response message for this operation kind."""
        if not self.success:
            result: dict[str, Any] = {
                "success": False,
                "error": self.error,
                "error_type": self.error_type,
            }
            if self.text is not None:
                result["transcript"] = self.text
            return result

        if self.kind in (OperationKind.SEARCH, OperationKind.LIST_INSTALLED):
            return {
                "success": True,
                "data": [pkg.to_dict() for pkg in self.packages],
                "backend": self.backend.value if self.backend else None,
            }
        if self.kind == OperationKind.CHECK_INSTALLED:
            return {"success": True, "installed_names": list(self.installed_names)}
        if self.kind == OperationKind.CHECK_UNINSTALL:
            return {"success": True, "advisory_text": self.text or ""}
        return {"success": True, "transcript": self.text or ""}
