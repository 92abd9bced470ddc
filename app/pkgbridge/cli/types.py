"""Shared helpers for CLI commands.

Every command builds its bridge, reads credentials and reports failures
the same way; those pieces live here.
"""

import json
from typing import Any

import typer

from pkgbridge.core.bridge import PackageBridge
from pkgbridge.core.config import BridgeConfig, ConfigError, load_config_or_default
from pkgbridge.core.session import Session
from pkgbridge.models.operation import OperationResult
from pkgbridge.utils.formatting import print_error, print_text


def load_settings(**overrides: Any) -> BridgeConfig:
    """Load the user config and apply command-line overrides.

    Exits with code 1 if the config file is invalid.
    """
    try:
        config = load_config_or_default()
        if overrides:
            config = BridgeConfig.model_validate({**config.model_dump(), **overrides})
    except (ConfigError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    return config


def build_bridge(**overrides: Any) -> PackageBridge:
    """Create a bridge for one CLI invocation."""
    return PackageBridge(Session(load_settings(**overrides)))


def read_credential(password_stdin: bool) -> str:
    """Read the administrator password.

    Args:
        password_stdin: Read a single line from stdin instead of prompting.

    Returns:
        The password, without its line terminator.
    """
    if password_stdin:
        line = typer.get_text_stream("stdin").readline()
        return line.rstrip("\r\n")
    return typer.prompt("Administrator password", hide_input=True)


def echo_json(data: object) -> None:
    """Write JSON to stdout for scripting."""
    typer.echo(json.dumps(data, indent=2))


def exit_on_failure(result: OperationResult, json_output: bool = False) -> None:
    """Report a failed result and exit with code 1.

    Partial command output, when there is any, is shown before the error.
    """
    if result.success:
        return
    if json_output:
        echo_json(result.to_dict())
    else:
        if result.text:
            print_text(result.text)
        print_error(result.error or "Operation failed")
    raise typer.Exit(code=1)
