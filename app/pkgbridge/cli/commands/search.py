"""Search command implementation.

Searches the package catalog and marks results that are installed.
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


def search(
    query: Annotated[str, typer.Argument(help="Search term.")],
    field: Annotated[
        SearchField,
        typer.Option(
            "--field",
            "-f",
            help="Match the query against this field only.",
            case_sensitive=False,
        ),
    ] = SearchField.ALL,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, max=1000, help="Maximum number of results."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Search available packages.

    Examples:
        pkgbridge search htop
        pkgbridge search editor --field description
        pkgbridge search vim --json
    """
    overrides = {"search_limit": limit} if limit is not None else {}
    bridge = build_bridge(**overrides)

    with console.status(f"Searching for {query}...", spinner="dots"):
        result = bridge.search_packages(query, field)
    exit_on_failure(result, json_output)

    if json_output:
        echo_json(result.to_dict())
        return

    if not result.packages:
        print_info(f"No packages found for '{query}'.")
        return

    table = create_package_table(title=f"Search: {query}")
    for pkg in result.packages:
        table.add_row(*format_package_row(pkg))
    console.print(table)

    installed_count = sum(1 for pkg in result.packages if pkg.installed)
    console.print(
        f"\n[muted]{len(result.packages)} results, {installed_count} installed "
        f"({result.backend.value if result.backend else '?'})[/]"
    )
