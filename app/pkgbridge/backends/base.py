"""Abstract base class for package-manager backends.

This module defines the Backend interface that every supported package
manager implements: command synthesis for the six logical operations and
parsing of the manager's text output into Package records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from pkgbridge.core.commands import CommandSpec
from pkgbridge.core.tokens import validate_names, validate_token
from pkgbridge.models.package import BackendKind, ListingContext, Package
from pkgbridge.utils.shell import command_exists

DEFAULT_SEARCH_LIMIT = 100


class Backend(ABC):
    """Abstract base class for all package-manager backends.

    Public command builders validate every user-supplied token before it
    reaches an argument vector; subclasses only implement the private
    ``_*_command`` builders and the two parsers.

    Example:
        >>> backend = AptBackend()
        >>> if backend.is_available():
        ...     spec = backend.search_command("vim")
        ...     packages = backend.parse(raw_output, ListingContext.SEARCH)
    """

    @property
    @abstractmethod
    def kind(self) -> BackendKind:
        """Return the backend kind this class implements."""

    @property
    @abstractmethod
    def executable(self) -> str:
        """Return the primary executable probed during detection."""

    def is_available(self) -> bool:
        """Check if this package manager is present on the system."""
        return command_exists(self.executable)

    # ------------------------------------------------------------------
    # Command synthesis
    # ------------------------------------------------------------------

    def search_command(self, query: str, *, limit: int = DEFAULT_SEARCH_LIMIT) -> CommandSpec:
        """Build the search command for a query.

        Raises:
            UnsafeTokenError: If the query fails the allow-list check.
        """
        return self._search_command(validate_token(query, "search query"), limit)

    def list_installed_command(self) -> CommandSpec:
        """Build the command listing every installed package."""
        return self._list_installed_command()

    def check_installed_command(self, name: str) -> CommandSpec:
        """Build a probe that succeeds only if ``name`` is installed.

        Raises:
            UnsafeTokenError: If the name fails the allow-list check.
        """
        return self._check_installed_command(validate_token(name))

    def check_installed_commands(self, names: list[str]) -> Iterator[tuple[str, CommandSpec]]:
        """Yield one independent probe per distinct name.

        No backend offers a batch installed-status primitive, so the
        caller runs these one at a time.

        Raises:
            InvalidRequestError: If names is empty.
            UnsafeTokenError: If any name fails the allow-list check.
        """
        for name in validate_names(names):
            yield name, self._check_installed_command(name)

    def check_uninstall_command(self, names: list[str]) -> CommandSpec:
        """Build a dry-run removal that prints what would be removed.

        Raises:
            InvalidRequestError: If names is empty.
            UnsafeTokenError: If any name fails the allow-list check.
        """
        return self._check_uninstall_command(validate_names(names))

    def install_command(self, names: list[str]) -> CommandSpec:
        """Build the privileged install command.

        Raises:
            InvalidRequestError: If names is empty.
            UnsafeTokenError: If any name fails the allow-list check.
        """
        return self._install_command(validate_names(names))

    def uninstall_command(self, names: list[str]) -> CommandSpec:
        """Build the privileged removal command.

        Raises:
            InvalidRequestError: If names is empty.
            UnsafeTokenError: If any name fails the allow-list check.
        """
        return self._uninstall_command(validate_names(names))

    @abstractmethod
    def _search_command(self, query: str, limit: int) -> CommandSpec: ...

    @abstractmethod
    def _list_installed_command(self) -> CommandSpec: ...

    @abstractmethod
    def _check_installed_command(self, name: str) -> CommandSpec: ...

    @abstractmethod
    def _check_uninstall_command(self, names: tuple[str, ...]) -> CommandSpec: ...

    @abstractmethod
    def _install_command(self, names: tuple[str, ...]) -> CommandSpec: ...

    @abstractmethod
    def _uninstall_command(self, names: tuple[str, ...]) -> CommandSpec: ...

    # ------------------------------------------------------------------
    # Output parsing
    # ------------------------------------------------------------------

    def parse(self, raw: str, context: ListingContext) -> list[Package]:
        """Parse raw backend output into packages.

        Parsing is tolerant: lines that cannot be understood are dropped
        and an empty list is a valid "no matches" result.

        Args:
            raw: Captured stdout of a search or list-installed command.
            context: Which of the two listings the text came from.

        Returns:
            Packages in output order.
        """
        if context == ListingContext.SEARCH:
            return list(self.parse_search(raw))
        return list(self.parse_installed(raw))

    @abstractmethod
    def parse_search(self, raw: str) -> Iterator[Package]:
        """Yield packages from search output."""

    @abstractmethod
    def parse_installed(self, raw: str) -> Iterator[Package]:
        """Yield packages from installed-listing output."""

    @staticmethod
    def _make_package(name: str, **fields: str) -> Package | None:
        """Build a Package, returning None if the name is unusable."""
        try:
            return Package(name=name, **fields)  # type: ignore[arg-type]
        except ValueError:
            return None
