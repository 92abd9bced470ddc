"""The logical operation contract.

PackageBridge is the only surface a user interface talks to. Every
method returns an OperationResult; pkgbridge errors raised by the layers
below are converted into failure results here and nowhere else.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from pkgbridge.core.errors import (
    ExecutionError,
    InvalidRequestError,
    PkgBridgeError,
)
from pkgbridge.core.executor import validate_credential
from pkgbridge.core.reconciler import ResultReconciler
from pkgbridge.core.session import Session
from pkgbridge.core.state import StateManager
from pkgbridge.core.tokens import validate_names
from pkgbridge.models.history import HistoryActionType, create_history_entry
from pkgbridge.models.operation import OperationKind, OperationRequest, OperationResult
from pkgbridge.models.package import ListingContext, SearchField

logger = logging.getLogger(__name__)


class PackageBridge:
    """Search, list, check, install and uninstall through the active backend.

    Operations run one at a time from the caller's point of view; each
    returns only after every process it started has finished.

    Example:
        >>> bridge = PackageBridge()
        >>> result = bridge.search_packages("htop")
        >>> if result.success:
        ...     for pkg in result.packages:
        ...         print(pkg.name, pkg.installed)
    """

    def __init__(self, session: Session | None = None, state: StateManager | None = None) -> None:
        """Initialize the bridge.

        Args:
            session: Session context. If None, a default session is created.
            state: History store. If None and history is enabled, the default store.
        """
        self.session = session or Session()
        if state is None and self.session.config.record_history:
            state = StateManager()
        self._state = state
        self._reconciler = ResultReconciler(self.session.executor)

    # ------------------------------------------------------------------
    # Read-only operations
    # ------------------------------------------------------------------

    def search_packages(
        self,
        query: str,
        search_field: SearchField = SearchField.ALL,
    ) -> OperationResult:
        """Search the backend's catalog and mark installed results.

        If the installed check fails outright, results are returned with
        ``installed`` left False.
        """
        return self._guard(OperationKind.SEARCH, lambda: self._search(query, search_field))

    def list_installed(self) -> OperationResult:
        """List every installed package with its version."""
        return self._guard(OperationKind.LIST_INSTALLED, self._list_installed)

    def check_installed(self, names: Sequence[str]) -> OperationResult:
        """Return which of the given names are installed.

        A failing probe marks that one name as not installed; it never
        fails the batch.
        """
        return self._guard(OperationKind.CHECK_INSTALLED, lambda: self._check_installed(names))

    def check_uninstall(self, names: Sequence[str]) -> OperationResult:
        """Describe what removing the given packages would do, without doing it."""
        return self._guard(OperationKind.CHECK_UNINSTALL, lambda: self._check_uninstall(names))

    # ------------------------------------------------------------------
    # Privileged operations
    # ------------------------------------------------------------------

    def install_packages(self, names: Sequence[str], credential: str) -> OperationResult:
        """Install packages; the transcript is returned on success and failure."""
        return self._guard(
            OperationKind.INSTALL,
            lambda: self._privileged(OperationKind.INSTALL, names, credential),
        )

    def uninstall_packages(self, names: Sequence[str], credential: str) -> OperationResult:
        """Remove packages; the transcript is returned on success and failure."""
        return self._guard(
            OperationKind.UNINSTALL,
            lambda: self._privileged(OperationKind.UNINSTALL, names, credential),
        )

    # ------------------------------------------------------------------
    # Request/response boundary
    # ------------------------------------------------------------------

    def handle(self, request: OperationRequest) -> OperationResult:
        """Dispatch a request to the matching operation."""
        kind = request.kind
        if kind == OperationKind.SEARCH:
            if not request.query:
                return OperationResult.failure(
                    kind, InvalidRequestError("A search query is required")
                )
            return self.search_packages(request.query, request.search_field)
        if kind == OperationKind.LIST_INSTALLED:
            return self.list_installed()
        if kind == OperationKind.CHECK_INSTALLED:
            return self.check_installed(request.names)
        if kind == OperationKind.CHECK_UNINSTALL:
            return self.check_uninstall(request.names)
        if kind == OperationKind.INSTALL:
            return self.install_packages(request.names, request.credential or "")
        return self.uninstall_packages(request.names, request.credential or "")

    def handle_message(self, message: dict[str, Any]) -> dict[str, Any]:
        """Handle one request message and return the response message.

        Malformed messages produce an ``invalid_request`` response; this
        method does not raise for bad input. A request ``id`` is echoed.
        """
        try:
            request = OperationRequest.from_dict(message)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Rejecting malformed request: %s", e)
            response: dict[str, Any] = {
                "success": False,
                "error": f"Malformed request: {e}",
                "error_type": InvalidRequestError.error_type,
            }
        else:
            response = self.handle(request).to_dict()

        if isinstance(message, dict) and "id" in message:
            response["id"] = message["id"]
        return response

    # ------------------------------------------------------------------
    # Implementation
    # ------------------------------------------------------------------

    def _guard(self, kind: OperationKind, operation: Callable[[], OperationResult]) -> OperationResult:
        try:
            return operation()
        except ExecutionError as e:
            logger.warning("%s failed: %s", kind.value, e)
            return OperationResult.failure(
                kind,
                e,
                backend=self.session.backend_kind,
                text=e.output or None,
            )
        except PkgBridgeError as e:
            logger.info("%s rejected: %s", kind.value, e)
            return OperationResult.failure(kind, e, backend=self.session.backend_kind)

    def _search(self, query: str, search_field: SearchField) -> OperationResult:
        backend = self.session.backend()
        spec = backend.search_command(query, limit=self.session.config.search_limit)
        result = self.session.executor.run(spec)
        packages = backend.parse(result.stdout, ListingContext.SEARCH)

        if search_field != SearchField.ALL:
            packages = [pkg for pkg in packages if pkg.matches(query, search_field)]

        try:
            packages = self._reconciler.annotate(backend, packages)
        except PkgBridgeError as e:
            logger.warning("Installed check failed, results left unannotated: %s", e)

        return OperationResult(
            kind=OperationKind.SEARCH,
            success=True,
            backend=backend.kind,
            packages=tuple(packages),
        )

    def _list_installed(self) -> OperationResult:
        backend = self.session.backend()
        result = self.session.executor.run(backend.list_installed_command())
        packages = [
            pkg.with_installed(True)
            for pkg in backend.parse(result.stdout, ListingContext.INSTALLED)
        ]
        return OperationResult(
            kind=OperationKind.LIST_INSTALLED,
            success=True,
            backend=backend.kind,
            packages=tuple(packages),
        )

    def _check_installed(self, names: Sequence[str]) -> OperationResult:
        backend = self.session.backend()
        valid = validate_names(names)
        installed = self._reconciler.installed_names(backend, valid)
        return OperationResult(
            kind=OperationKind.CHECK_INSTALLED,
            success=True,
            backend=backend.kind,
            installed_names=tuple(installed),
        )

    def _check_uninstall(self, names: Sequence[str]) -> OperationResult:
        backend = self.session.backend()
        spec = backend.check_uninstall_command(list(names))
        # Non-zero exit is advisory here; only spawn failures raise
        result = self.session.executor.run(spec)
        return OperationResult(
            kind=OperationKind.CHECK_UNINSTALL,
            success=True,
            backend=backend.kind,
            text=result.output,
        )

    def _privileged(
        self,
        kind: OperationKind,
        names: Sequence[str],
        credential: str,
    ) -> OperationResult:
        backend = self.session.backend()
        if kind == OperationKind.INSTALL:
            spec = backend.install_command(list(names))
        else:
            spec = backend.uninstall_command(list(names))
        valid = validate_names(names)
        validate_credential(credential)

        with self.session.privileged_operation():
            try:
                result = self.session.executor.run_privileged(spec, credential)
            except ExecutionError as e:
                self._record(kind, valid, success=False, error_type=e.error_type)
                raise

        self._record(kind, valid, success=True)
        return OperationResult(
            kind=kind,
            success=True,
            backend=backend.kind,
            text=result.output,
        )

    def _record(
        self,
        kind: OperationKind,
        names: tuple[str, ...],
        *,
        success: bool,
        error_type: str | None = None,
    ) -> None:
        """Append the attempt to history; failures here never affect the result."""
        backend_kind = self.session.backend_kind
        if self._state is None or backend_kind is None:
            return

        action = HistoryActionType.INSTALL if kind == OperationKind.INSTALL else HistoryActionType.UNINSTALL
        try:
            entry = create_history_entry(
                action,
                backend_kind,
                names,
                success=success,
                error_type=error_type,
            )
            self._state.record(entry)
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning("Failed to record %s to history: %s", kind.value, e)
