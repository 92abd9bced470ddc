"""Check command implementation."""

from typing import Annotated

import typer
from rich.markup import escape

from pkgbridge.cli.types import build_bridge, echo_json, exit_on_failure
from pkgbridge.utils.formatting import console


def check(
    names: Annotated[list[str], typer.Argument(help="Package names to check.")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Check which of the given packages are installed.

    Examples:
        pkgbridge check git curl
    """
    bridge = build_bridge()
    result = bridge.check_installed(names)
    exit_on_failure(result, json_output)

    if json_output:
        echo_json(result.to_dict())
        return

    found = set(result.installed_names)
    for name in dict.fromkeys(names):
        if name in found:
            console.print(f"[package_installed]●[/] {escape(name)} [success]installed[/]")
        else:
            console.print(f"[package_available]○[/] {escape(name)} [muted]not installed[/]")
