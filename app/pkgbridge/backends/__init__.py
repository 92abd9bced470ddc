"""Package-manager backends.

Each backend pairs command synthesis with output parsing for one
package-manager family. Adding a family means adding one class here
and one entry in :data:`BACKENDS`.
"""

from pkgbridge.backends.apt import AptBackend
from pkgbridge.backends.base import Backend
from pkgbridge.backends.dnf import DnfBackend
from pkgbridge.backends.pacman import PacmanBackend
from pkgbridge.models.package import BackendKind

BACKENDS: dict[BackendKind, type[Backend]] = {
    BackendKind.APT: AptBackend,
    BackendKind.DNF: DnfBackend,
    BackendKind.PACMAN: PacmanBackend,
}


def get_backend(kind: BackendKind) -> Backend:
    """Create the backend instance for a kind.

    Args:
        kind: Backend kind to instantiate.

    Returns:
        Backend implementation for that kind.
    """
    return BACKENDS[kind]()


__all__ = ["AptBackend", "BACKENDS", "Backend", "DnfBackend", "PacmanBackend", "get_backend"]
