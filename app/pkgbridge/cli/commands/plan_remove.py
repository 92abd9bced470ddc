"""Plan-remove command implementation.

Shows what removing packages would do, without removing anything.
"""

from typing import Annotated

import typer

from pkgbridge.cli.types import build_bridge, echo_json, exit_on_failure
from pkgbridge.utils.formatting import print_info, print_text


def plan_remove(
    names: Annotated[list[str], typer.Argument(help="Package names to inspect.")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Preview the effect of removing packages.

    Examples:
        pkgbridge plan-remove vim
    """
    bridge = build_bridge()
    result = bridge.check_uninstall(names)
    exit_on_failure(result, json_output)

    if json_output:
        echo_json(result.to_dict())
    elif result.text:
        print_text(result.text)
    else:
        print_info("The package manager reported nothing.")
