"""Package-manager detection.

Probes the host for the primary executable of each supported backend,
in a fixed priority order. Probing only looks the executable up on PATH
and never spawns a process.
"""

import logging
from collections.abc import Sequence

from pkgbridge.backends import get_backend
from pkgbridge.core.errors import NoBackendFoundError
from pkgbridge.models.package import BackendKind

logger = logging.getLogger(__name__)

DETECTION_ORDER: tuple[BackendKind, ...] = (
    BackendKind.APT,
    BackendKind.DNF,
    BackendKind.PACMAN,
)


class BackendDetector:
    """Resolves which backend is active on this host.

    Attributes:
        order: Backend kinds in probe priority order.
        pinned: Backend kind forced by configuration, if any.
    """

    def __init__(
        self,
        order: Sequence[BackendKind] = DETECTION_ORDER,
        pinned: BackendKind | None = None,
    ) -> None:
        """Initialize the detector.

        Args:
            order: Backend kinds in probe priority order.
            pinned: Only consider this backend kind.
        """
        self.order = tuple(order)
        self.pinned = pinned

    def detect(self) -> BackendKind | None:
        """Return the first backend whose executable is present.

        Returns:
            The detected BackendKind, or None if no backend is present.
        """
        candidates = (self.pinned,) if self.pinned is not None else self.order
        for kind in candidates:
            backend = get_backend(kind)
            if backend.is_available():
                logger.debug("Detected %s backend (%s)", kind.value, backend.executable)
                return kind
            logger.debug("%s not found, skipping %s", backend.executable, kind.value)

        return None

    def require(self) -> BackendKind:
        """Return the detected backend kind.

        Raises:
            NoBackendFoundError: If no supported package manager is present.
        """
        kind = self.detect()
        if kind is None:
            if self.pinned is not None:
                raise NoBackendFoundError(
                    f"Configured package manager {self.pinned.value!r} is not installed"
                )
            raise NoBackendFoundError()
        return kind
