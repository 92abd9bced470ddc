"""Unit tests for config commands."""

import json
import tomllib
from pathlib import Path

import pytest
from pkgbridge.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path / "pkgbridge" / "config.toml"


class TestConfigCommands:
    """Tests for pkgbridge config."""

    def test_path(self, config_home: Path) -> None:
        """config path prints the file location."""
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(config_home)

    def test_init_writes_defaults(self, config_home: Path) -> None:
        """config init creates a loadable file."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        with open(config_home, "rb") as f:
            assert tomllib.load(f)["search_limit"] == 100

    def test_init_refuses_overwrite(self, config_home: Path) -> None:
        """An existing file is kept unless --force is given."""
        config_home.parent.mkdir(parents=True)
        config_home.write_text("search_limit = 5\n")

        assert runner.invoke(app, ["config", "init"]).exit_code == 1
        assert runner.invoke(app, ["config", "init", "--force"]).exit_code == 0
        assert "search_limit = 100" in config_home.read_text()

    def test_show_merges_file(self, config_home: Path) -> None:
        """config show reports file values over defaults."""
        config_home.parent.mkdir(parents=True)
        config_home.write_text('backend = "pacman"\n')

        result = runner.invoke(app, ["config", "show", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["backend"] == "pacman"
        assert data["sudo_path"] == "sudo"

    def test_show_invalid_file(self, config_home: Path) -> None:
        """An invalid file is reported and exits with code 1."""
        config_home.parent.mkdir(parents=True)
        config_home.write_text("search_limit = -1\n")

        assert runner.invoke(app, ["config", "show"]).exit_code == 1
