"""APT backend implementation.

Searches with apt-cache, lists with ``apt list --installed``, probes
single packages with dpkg-query and mutates the system with apt-get.
"""

import logging
import re
from collections.abc import Iterator

from pkgbridge.backends.base import Backend
from pkgbridge.core.commands import CommandSpec
from pkgbridge.models.package import BackendKind, Package

logger = logging.getLogger(__name__)

# "name - description"; the name is everything up to the first " - "
_SEARCH_LINE = re.compile(r"^(\S+)\s+-\s+(.+)$")

# Epoch, upstream version and revision: digits, dots, dashes, colons
_VERSION = re.compile(r"\d+[\d.\-:]+\d+")

_INSTALLED_MARKER = "[installed"

# dpkg-query prints "ii " for packages that are installed and configured
_DPKG_INSTALLED = re.compile(r"^ii\s")


class AptBackend(Backend):
    """Backend for Debian-style systems (apt-get, apt-cache, dpkg-query)."""

    @property
    def kind(self) -> BackendKind:
        """Return APT as the backend kind."""
        return BackendKind.APT

    @property
    def executable(self) -> str:
        """Return apt-get as the detection probe."""
        return "apt-get"

    def _search_command(self, query: str, limit: int) -> CommandSpec:
        return CommandSpec(
            args=("apt-cache", "search", query),
            tolerate_nonzero=True,
            max_lines=limit,
        )

    def _list_installed_command(self) -> CommandSpec:
        return CommandSpec(args=("apt", "list", "--installed"))

    def _check_installed_command(self, name: str) -> CommandSpec:
        return CommandSpec(
            args=("dpkg-query", "-W", "--showformat=${db:Status-Abbrev} ${Package}\\n", name),
            line_pattern=_DPKG_INSTALLED,
            require_match=True,
        )

    def _check_uninstall_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(
            args=("apt-get", "--simulate", "remove", *names),
            tolerate_nonzero=True,
            merge_stderr=True,
        )

    def _install_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(args=("apt-get", "install", "-y", *names), privileged=True)

    def _uninstall_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(args=("apt-get", "remove", "-y", *names), privileged=True)

    def parse_search(self, raw: str) -> Iterator[Package]:
        """Parse ``apt-cache search`` output (``name - description`` lines)."""
        for line in raw.splitlines():
            if not line.strip():
                continue
            match = _SEARCH_LINE.match(line)
            if match is None:
                logger.debug("Skipping unrecognized apt search line: %r", line[:100])
                continue
            package = self._make_package(match.group(1), description=match.group(2).strip())
            if package is not None:
                yield package

    def parse_installed(self, raw: str) -> Iterator[Package]:
        """Parse ``apt list --installed`` output.

        Lines look like ``vim/jammy,now 2:8.2.3995-1ubuntu2 amd64 [installed]``.
        Only lines carrying an installed marker are kept; a version that
        cannot be recognized is left empty.
        """
        for line in raw.splitlines():
            if _INSTALLED_MARKER not in line:
                continue
            package = self._parse_installed_line(line)
            if package is not None:
                yield package

    def _parse_installed_line(self, line: str) -> Package | None:
        head, _, rest = line.strip().partition(" ")
        name = head.split("/", 1)[0]
        if not name:
            logger.debug("Skipping apt installed line without name: %r", line[:100])
            return None

        # Only the version column, so digits in the name or architecture are ignored
        fields = rest.split()
        match = _VERSION.search(fields[0]) if fields else None
        version = match.group(0) if match else ""
        return self._make_package(name, version=version)
