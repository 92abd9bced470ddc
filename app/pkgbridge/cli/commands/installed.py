"""Installed command implementation.

Lists every installed package with its version.
"""

from typing import Annotated

import typer

from pkgbridge.cli.types import build_bridge, echo_json, exit_on_failure
from pkgbridge.models.package import SearchField
from pkgbridge.utils.formatting import (
    console,
    create_package_table,
    format_package_row,
    print_info,
)


def installed(
    name_filter: Annotated[
        str | None,
        typer.Option("--filter", help="Only show packages whose name or version contains this text."),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Limit number of results."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """List installed packages.

    Examples:
        pkgbridge installed
        pkgbridge installed --filter python
        pkgbridge installed --json
    """
    bridge = build_bridge()
    result = bridge.list_installed()
    exit_on_failure(result, json_output)

    packages = list(result.packages)
    if name_filter:
        needle = name_filter.lower()
        packages = [
            pkg
            for pkg in packages
            if pkg.matches(name_filter, SearchField.NAME) or needle in pkg.version.lower()
        ]
    total = len(packages)
    if limit:
        packages = packages[:limit]

    if json_output:
        echo_json(
            {
                "success": True,
                "data": [pkg.to_dict() for pkg in packages],
                "backend": result.backend.value if result.backend else None,
            }
        )
        return

    if not packages:
        print_info("No installed packages matched.")
        return

    table = create_package_table(title="Installed Packages")
    for pkg in packages:
        table.add_row(*format_package_row(pkg))
    console.print(table)

    console.print(f"\n[muted]{total} installed packages[/]")
    if len(packages) < total:
        console.print(f"[muted](showing {len(packages)} of {total}, limited to {limit})[/]")
