"""Install and uninstall commands.

Both commands need the administrator password. It is read from a hidden
prompt or, with --password-stdin, from the first line of stdin; it is
never accepted as an argument.
"""

from collections.abc import Callable
from typing import Annotated

import typer

from pkgbridge.cli.types import build_bridge, exit_on_failure, read_credential
from pkgbridge.models.operation import OperationResult
from pkgbridge.utils.formatting import print_info, print_success, print_text

NamesArg = Annotated[list[str], typer.Argument(help="Package names.")]
YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Skip confirmation prompt."),
]
PasswordStdinOption = Annotated[
    bool,
    typer.Option("--password-stdin", help="Read the administrator password from stdin."),
]


def install(
    names: NamesArg,
    yes: YesOption = False,
    password_stdin: PasswordStdinOption = False,
) -> None:
    """Install packages.

    Examples:
        pkgbridge install htop
        echo "$PASSWORD" | pkgbridge install -y --password-stdin htop
    """
    bridge = build_bridge()
    _run(
        "Install",
        names,
        yes,
        password_stdin,
        bridge.install_packages,
    )


def uninstall(
    names: NamesArg,
    yes: YesOption = False,
    password_stdin: PasswordStdinOption = False,
) -> None:
    """Remove packages.

    Run plan-remove first to see what else would be removed.

    Examples:
        pkgbridge uninstall htop
    """
    bridge = build_bridge()
    _run(
        "Remove",
        names,
        yes,
        password_stdin,
        bridge.uninstall_packages,
    )


def _run(
    verb: str,
    names: list[str],
    yes: bool,
    password_stdin: bool,
    operation: Callable[[list[str], str], OperationResult],
) -> None:
    """Confirm, read the password, run the operation and print its transcript."""
    if not yes and not typer.confirm(f"{verb} {', '.join(names)}?"):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    result = operation(names, read_credential(password_stdin))
    exit_on_failure(result)

    if result.text:
        print_text(result.text)
    print_success(f"{verb} completed: {', '.join(dict.fromkeys(names))}")
