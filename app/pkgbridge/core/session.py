"""Per-session context shared by every operation.

A Session owns the memoized backend and the flag that keeps privileged
operations from overlapping. It is created at session start and passed
to the operation layer explicitly; there is no module-level state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from pkgbridge.backends import get_backend
from pkgbridge.backends.base import Backend
from pkgbridge.core.config import BridgeConfig
from pkgbridge.core.detector import BackendDetector
from pkgbridge.core.errors import OperationInProgressError
from pkgbridge.core.executor import PrivilegedExecutor
from pkgbridge.models.package import BackendKind

logger = logging.getLogger(__name__)


class Session:
    """Session-scoped state for the operation layer.

    Attributes:
        config: Settings for this session.
        detector: Detector used to resolve the backend.
        executor: Executor used for every command of this session.
    """

    def __init__(
        self,
        config: BridgeConfig | None = None,
        *,
        detector: BackendDetector | None = None,
        executor: PrivilegedExecutor | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Session settings. If None, defaults are used.
            detector: Backend detector. If None, one honoring ``config.backend``.
            executor: Command executor. If None, one using ``config``.
        """
        self.config = config or BridgeConfig()
        self.detector = detector or BackendDetector(pinned=self.config.backend)
        self.executor = executor or PrivilegedExecutor(self.config)
        self._backend: Backend | None = None
        self._privileged_lock = threading.Lock()

    @property
    def backend_kind(self) -> BackendKind | None:
        """Return the memoized backend kind, or None before the first detection."""
        return self._backend.kind if self._backend is not None else None

    def backend(self) -> Backend:
        """Return the active backend, detecting it on first use.

        A successful detection is memoized for the rest of the session; a
        failed one is not, so installing a package manager and retrying
        works without a new session.

        Raises:
            NoBackendFoundError: If no supported package manager is present.
        """
        if self._backend is None:
            kind = self.detector.require()
            self._backend = get_backend(kind)
            logger.info("Using %s backend", kind.value)
        return self._backend

    def redetect(self) -> BackendKind | None:
        """Forget the memoized backend and probe again.

        Returns:
            The newly detected backend kind, or None if none is present.
        """
        self._backend = None
        kind = self.detector.detect()
        if kind is not None:
            self._backend = get_backend(kind)
        return kind

    @property
    def privileged_in_flight(self) -> bool:
        """Check if a privileged operation is currently running."""
        return self._privileged_lock.locked()

    @contextmanager
    def privileged_operation(self) -> Iterator[None]:
        """Hold the session's privileged-operation slot.

        Raises:
            OperationInProgressError: If another privileged operation holds it.
        """
        if not self._privileged_lock.acquire(blocking=False):
            raise OperationInProgressError()
        try:
            yield
        finally:
            self._privileged_lock.release()
