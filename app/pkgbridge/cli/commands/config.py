"""Config commands.

Shows, creates and locates the pkgbridge configuration file.
"""

from typing import Annotated

import tomli_w
import typer

from pkgbridge.cli.types import echo_json, load_settings
from pkgbridge.core.config import BridgeConfig, ConfigError, config_to_dict, save_config
from pkgbridge.core.paths import get_config_path
from pkgbridge.utils.formatting import print_error, print_success, print_text, print_warning

app = typer.Typer(
    help="Show or create the configuration file.",
    no_args_is_help=True,
)


@app.command()
def show(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the effective configuration (file values over defaults)."""
    data = config_to_dict(load_settings())
    if json_output:
        echo_json(data)
    else:
        print_text(tomli_w.dumps(data))


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file containing the defaults."""
    path = get_config_path()
    if path.exists() and not force:
        print_warning(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        save_config(BridgeConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    print_success(f"Wrote {path}")


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
