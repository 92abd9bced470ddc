"""Detect command implementation."""

from typing import Annotated

import typer

from pkgbridge.cli.types import build_bridge, echo_json
from pkgbridge.utils.formatting import print_error, print_success


def detect(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show which package manager pkgbridge will use."""
    bridge = build_bridge()
    kind = bridge.session.redetect()

    if json_output:
        echo_json({"backend": kind.value if kind else None})
    elif kind is not None:
        print_success(f"{kind.value} ({kind.family} family)")
    else:
        print_error("No supported package manager found (apt, dnf, pacman)")

    if kind is None:
        raise typer.Exit(code=1)
