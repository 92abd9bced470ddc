"""DNF backend implementation.

Drives dnf for every operation. Output is whitespace-tokenized; package
tokens carry an architecture suffix (``vim-enhanced.x86_64``) that is
stripped from the name.
"""

import logging
import re
from collections.abc import Iterator

from pkgbridge.backends.base import Backend
from pkgbridge.core.commands import CommandSpec
from pkgbridge.models.package import BackendKind, Package

logger = logging.getLogger(__name__)

# Package rows start with a name; banners such as "=== Name Matched ===" do not
_PACKAGE_ROW = re.compile(r"^\s*[A-Za-z0-9]")

# Status lines printed by dnf 4 and dnf 5 ahead of (or between) package rows
_STATUS_HEADER = re.compile(
    r"^\s*(Last metadata expiration check|Installed [Pp]ackages|Available [Pp]ackages"
    r"|Updating and loading repositories|Repositories loaded|Matched fields)"
)

_ARCHITECTURES: frozenset[str] = frozenset(
    {
        "aarch64",
        "armv7hl",
        "i386",
        "i686",
        "noarch",
        "ppc64le",
        "riscv64",
        "s390x",
        "src",
        "x86_64",
    }
)


def strip_architecture(token: str) -> str:
    """Remove a trailing ``.arch`` suffix from a dnf package token.

    Only known architectures are stripped, so dotted names such as
    ``python3.11`` survive intact.
    """
    name, sep, arch = token.rpartition(".")
    if sep and name and arch in _ARCHITECTURES:
        return name
    return token


class DnfBackend(Backend):
    """Backend for RedHat-style systems (dnf 4 and dnf 5)."""

    @property
    def kind(self) -> BackendKind:
        """Return DNF as the backend kind."""
        return BackendKind.DNF

    @property
    def executable(self) -> str:
        """Return dnf as the detection probe."""
        return "dnf"

    def _search_command(self, query: str, limit: int) -> CommandSpec:
        return CommandSpec(
            args=("dnf", "search", query),
            tolerate_nonzero=True,
            line_pattern=_PACKAGE_ROW,
            max_lines=limit,
        )

    def _list_installed_command(self) -> CommandSpec:
        return CommandSpec(args=("dnf", "list", "--installed"))

    def _check_installed_command(self, name: str) -> CommandSpec:
        return CommandSpec(args=("dnf", "list", "--installed", name))

    def _check_uninstall_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(
            args=("dnf", "remove", "--assumeno", *names),
            tolerate_nonzero=True,
            merge_stderr=True,
        )

    def _install_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(args=("dnf", "install", "-y", *names), privileged=True)

    def _uninstall_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(args=("dnf", "remove", "-y", *names), privileged=True)

    def parse_search(self, raw: str) -> Iterator[Package]:
        """Parse ``dnf search`` output.

        dnf 4 prints ``name.arch : summary``, dnf 5 prints ``name.arch<TAB>summary``.
        The separating colon, if any, is not part of the description.
        """
        for tokens in self._rows(raw):
            rest = tokens[1:]
            if rest and rest[0] == ":":
                rest = rest[1:]
            package = self._make_package(
                strip_architecture(tokens[0]),
                description=" ".join(rest),
            )
            if package is not None:
                yield package

    def parse_installed(self, raw: str) -> Iterator[Package]:
        """Parse ``dnf list --installed`` output (``name.arch version repo``).

        The first non-empty line is always a status header and is dropped
        whatever it says; known headers further down are dropped by pattern.
        """
        for tokens in self._rows(_drop_leading_line(raw)):
            if len(tokens) < 2:
                logger.debug("Skipping dnf installed row without version: %r", tokens)
                continue
            package = self._make_package(strip_architecture(tokens[0]), version=tokens[1])
            if package is not None:
                yield package

    def _rows(self, raw: str) -> Iterator[list[str]]:
        """Yield the whitespace tokens of each package row.

        Status headers are discarded. dnf wraps rows whose name is wider
        than its column: the name stands alone and the remaining fields
        follow on an indented line. Such pairs are joined back together.
        """
        pending: str | None = None
        for line in raw.splitlines():
            if not line.strip() or _STATUS_HEADER.match(line):
                pending = None
                continue
            if not _PACKAGE_ROW.match(line):
                logger.debug("Skipping dnf banner line: %r", line[:100])
                pending = None
                continue

            tokens = line.split()
            if line[0].isspace():
                if pending is not None:
                    yield [pending, *tokens]
                    pending = None
                    continue
                if len(tokens) == 1:
                    logger.debug("Skipping orphaned dnf continuation line: %r", line[:100])
                    continue
            elif len(tokens) == 1:
                if pending is not None:
                    yield [pending]
                pending = tokens[0]
                continue

            if pending is not None:
                yield [pending]
                pending = None
            yield tokens

        if pending is not None:
            yield [pending]


def _drop_leading_line(raw: str) -> str:
    lines = raw.splitlines()
    for index, line in enumerate(lines):
        if line.strip():
            return "\n".join(lines[index + 1 :])
    return ""
