"""pkgbridge - one contract over apt, dnf and pacman."""

__version__ = "0.3.0"
