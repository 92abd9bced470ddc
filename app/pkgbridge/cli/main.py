"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from pkgbridge import __version__
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
from pkgbridge.utils.formatting import err_console

app = typer.Typer(
    name="pkgbridge",
    help="Search, inspect, install and remove packages through apt, dnf or pacman.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pkgbridge version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route pkgbridge log records to stderr through Rich.

    Args:
        verbose: Show debug records.
        quiet: Show errors only.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger = logging.getLogger("pkgbridge")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every executed command.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log errors.",
        ),
    ] = False,
) -> None:
    """pkgbridge - one front end for apt, dnf and pacman.

    The package manager is detected automatically; commands are built
    from validated arguments and never passed through a shell.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.command("detect")(detect.detect)
app.command("search")(search.search)
app.command("installed")(installed.installed)
app.command("check")(check.check)
app.command("plan-remove")(plan_remove.plan_remove)
app.command("install")(install.install)
app.command("uninstall")(install.uninstall)
app.command("serve")(serve.serve)
app.add_typer(history.app, name="history")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
