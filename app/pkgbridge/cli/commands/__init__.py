"""CLI commands for pkgbridge.

This package contains all subcommand implementations.
"""

from pkgbridge.cli.commands import (
    check,
    config,
    detect,
    history,
    install,
    installed,
    plan_remove,
    search,
    serve,
)

__all__ = [
    "check",
    "config",
    "detect",
    "history",
    "install",
    "installed",
    "plan_remove",
    "search",
    "serve",
]
