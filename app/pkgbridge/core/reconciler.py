"""Installed-state reconciliation for search results.

Search listings do not say reliably what is installed. The reconciler
probes each candidate name with the backend's single-package check and
annotates the packages with the outcome.
"""

import logging
from collections.abc import Iterable

from pkgbridge.backends.base import Backend
from pkgbridge.core.errors import ExecutionError, UnsafeTokenError
from pkgbridge.core.executor import PrivilegedExecutor
from pkgbridge.models.package import Package

logger = logging.getLogger(__name__)


class ResultReconciler:
    """Cross-references packages against the installed set."""

    def __init__(self, executor: PrivilegedExecutor) -> None:
        """Initialize the reconciler.

        Args:
            executor: Executor used to run the per-package probes.
        """
        self._executor = executor

    def installed_names(self, backend: Backend, names: Iterable[str]) -> list[str]:
        """Return the subset of names that are installed.

        Duplicate names are probed once. Each probe runs on its own; a
        probe that fails for any reason counts as "not installed" and
        never aborts the batch. Names that fail the token check are
        skipped without spawning a process.

        Args:
            backend: Backend whose probe command is used.
            names: Candidate package names.

        Returns:
            Installed names, in first-seen order.
        """
        installed: list[str] = []
        for name in dict.fromkeys(names):
            try:
                spec = backend.check_installed_command(name)
            except UnsafeTokenError:
                logger.debug("Not probing unsafe package name %r", name)
                continue

            try:
                self._executor.run(spec)
            except ExecutionError as e:
                logger.debug("Probe for %s failed, treating as not installed: %s", name, e)
                continue

            installed.append(name)

        return installed

    @staticmethod
    def reconcile(packages: Iterable[Package], installed_names: Iterable[str]) -> list[Package]:
        """Set each package's installed flag by membership in installed_names.

        Args:
            packages: Packages to annotate.
            installed_names: Names known to be installed.

        Returns:
            New Package instances, in input order.
        """
        lookup = frozenset(installed_names)
        return [pkg.with_installed(pkg.name in lookup) for pkg in packages]

    def annotate(self, backend: Backend, packages: list[Package]) -> list[Package]:
        """Probe the packages' names and return them annotated."""
        if not packages:
            return []
        names = self.installed_names(backend, (pkg.name for pkg in packages))
        return self.reconcile(packages, names)
