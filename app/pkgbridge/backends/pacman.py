"""Pacman backend implementation.

Sync-search output is made of two-line records::

    extra/htop 3.2.2-1 [installed]
        Interactive process viewer

The header line is flush-left and holds ``repo/name version``; the
description line is indented.
"""

import logging
from collections.abc import Iterator

from pkgbridge.backends.base import Backend
from pkgbridge.core.commands import CommandSpec
from pkgbridge.models.package import BackendKind, Package

logger = logging.getLogger(__name__)


class PacmanBackend(Backend):
    """Backend for Arch-style systems (pacman)."""

    @property
    def kind(self) -> BackendKind:
        """Return PACMAN as the backend kind."""
        return BackendKind.PACMAN

    @property
    def executable(self) -> str:
        """Return pacman as the detection probe."""
        return "pacman"

    def _search_command(self, query: str, limit: int) -> CommandSpec:
        # Two output lines per package
        return CommandSpec(
            args=("pacman", "-Ss", query),
            tolerate_nonzero=True,
            max_lines=limit * 2,
        )

    def _list_installed_command(self) -> CommandSpec:
        return CommandSpec(args=("pacman", "-Q"))

    def _check_installed_command(self, name: str) -> CommandSpec:
        return CommandSpec(args=("pacman", "-Q", name))

    def _check_uninstall_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(
            args=("pacman", "-R", "--print", *names),
            tolerate_nonzero=True,
            merge_stderr=True,
        )

    def _install_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(args=("pacman", "-S", "--noconfirm", *names), privileged=True)

    def _uninstall_command(self, names: tuple[str, ...]) -> CommandSpec:
        return CommandSpec(args=("pacman", "-R", "--noconfirm", *names), privileged=True)

    def parse_search(self, raw: str) -> Iterator[Package]:
        """Parse ``pacman -Ss`` output into packages.

        A header without a following indented line gets an empty
        description; the next header is never consumed as a description.
        """
        lines = raw.splitlines()
        index = 0
        while index < len(lines):
            line = lines[index]
            index += 1

            name = self._header_name(line)
            if name is None:
                if line.strip():
                    logger.debug("Skipping pacman search line: %r", line[:100])
                continue

            description = ""
            if index < len(lines) and lines[index][:1].isspace():
                description = lines[index].strip()
                index += 1

            package = self._make_package(name, description=description)
            if package is not None:
                yield package

    def parse_installed(self, raw: str) -> Iterator[Package]:
        """Parse ``pacman -Q`` output (``name version`` per line)."""
        for line in raw.splitlines():
            tokens = line.split()
            if len(tokens) < 2:
                if tokens:
                    logger.debug("Skipping pacman installed line: %r", line[:100])
                continue
            package = self._make_package(tokens[0], version=tokens[1])
            if package is not None:
                yield package

    @staticmethod
    def _header_name(line: str) -> str | None:
        """Return the package name of a ``repo/name version`` header line."""
        if not line or line[0].isspace():
            return None
        first = line.split(maxsplit=1)[0]
        repo, sep, name = first.partition("/")
        if not sep or not repo or not name:
            return None
        return name
