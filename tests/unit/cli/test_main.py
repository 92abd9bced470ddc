"""Unit tests for the main CLI application."""

import logging

from pkgbridge import __version__
from pkgbridge.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"pkgbridge version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """Every command is registered."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in (
            "detect",
            "search",
            "installed",
            "check",
            "plan-remove",
            "install",
            "uninstall",
            "serve",
            "history",
            "config",
        ):
            assert name in result.stdout


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_levels(self) -> None:
        """Verbosity flags map to log levels."""
        logger = logging.getLogger("pkgbridge")

        configure_logging(verbose=True)
        assert logger.level == logging.DEBUG
        configure_logging(quiet=True)
        assert logger.level == logging.ERROR
        configure_logging()
        assert logger.level == logging.WARNING

    def test_single_handler(self) -> None:
        """Repeated setup does not stack handlers."""
        configure_logging()
        configure_logging()
        assert len(logging.getLogger("pkgbridge").handlers) == 1
