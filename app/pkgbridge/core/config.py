"""Runtime configuration for pkgbridge.

Configuration is stored in ~/.config/pkgbridge/config.toml. Every key is
optional; a missing file means defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pkgbridge.core.paths import get_config_path
from pkgbridge.models.package import BackendKind
from pkgbridge.utils.shell import DEFAULT_MAX_OUTPUT_BYTES

logger = logging.getLogger(__name__)


class BridgeConfig(BaseModel):
    """Settings for detection, execution limits and history.

    Attributes:
        backend: Pin a backend instead of probing (None = detect).
        read_timeout_seconds: Timeout for search, list and check commands.
        privileged_timeout_seconds: Timeout for install and uninstall.
        max_output_bytes: Capture ceiling for one command (stdout + stderr).
        search_limit: Maximum number of search results kept.
        locale: Exported as LC_ALL to child processes (empty or None = inherit).
        sudo_path: Elevation command.
        record_history: Append install/uninstall attempts to the history file.
    """

    model_config = ConfigDict(extra="forbid")

    backend: Annotated[
        BackendKind | None,
        Field(description="Backend to use instead of probing"),
    ] = None
    read_timeout_seconds: Annotated[
        float,
        Field(ge=1, le=3600, description="Timeout for read-only commands (1-3600)"),
    ] = 60.0
    privileged_timeout_seconds: Annotated[
        float,
        Field(ge=10, le=7200, description="Timeout for install/uninstall (10-7200)"),
    ] = 900.0
    max_output_bytes: Annotated[
        int,
        Field(ge=64 * 1024, description="Capture ceiling in bytes"),
    ] = DEFAULT_MAX_OUTPUT_BYTES
    search_limit: Annotated[
        int,
        Field(ge=1, le=1000, description="Maximum search results (1-1000)"),
    ] = 100
    locale: Annotated[
        str | None,
        Field(description="LC_ALL for child processes (empty = inherit)"),
    ] = "C.UTF-8"
    sudo_path: Annotated[
        str,
        Field(min_length=1, description="Elevation command"),
    ] = "sudo"
    record_history: Annotated[
        bool,
        Field(description="Record install/uninstall attempts"),
    ] = True

    @property
    def child_env(self) -> dict[str, str]:
        """Environment overrides for every spawned command."""
        if self.locale:
            return {"LC_ALL": self.locale}
        return {}


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> BridgeConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated BridgeConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return BridgeConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> BridgeConfig:
    """Load configuration, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file, using defaults")
        return BridgeConfig()


def save_config(config: BridgeConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The BridgeConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: BridgeConfig) -> dict[str, object]:
    """Convert BridgeConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.

    Args:
        config: The BridgeConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    data = config.model_dump(mode="json", exclude_none=True)
    return dict(sorted(data.items()))
