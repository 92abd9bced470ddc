"""Unit tests for PrivilegedExecutor.

Most tests mock the process layer and cover argument assembly,
post-processing and error mapping. The sudo stand-in tests start real
processes.
"""

import re
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from pkgbridge.core.commands import CommandSpec
from pkgbridge.core.config import BridgeConfig
from pkgbridge.core.errors import (
    ExecutionError,
    ExecutionTimeoutError,
    InvalidRequestError,
    OutputLimitExceededError,
    PrivilegeDeniedError,
)
from pkgbridge.core.executor import PrivilegedExecutor, validate_credential
from pkgbridge.utils.shell import CaptureLimitExceeded, CommandResult

SECRET = "hunter2-secret"


@pytest.fixture
def executor() -> PrivilegedExecutor:
    """Create an executor with default settings."""
    return PrivilegedExecutor(BridgeConfig())


class TestRun:
    """Tests for read-only execution."""

    def test_success_returns_result(self, executor: PrivilegedExecutor) -> None:
        """A zero exit returns the captured output."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="out\n", stderr="", returncode=0)
            result = executor.run(CommandSpec(args=("apt", "list", "--installed")))

        assert result.stdout == "out\n"
        args = mock_run.call_args[0][0]
        assert args == ["apt", "list", "--installed"]
        kwargs = mock_run.call_args[1]
        assert kwargs["input_text"] is None
        assert kwargs["timeout"] == 60.0
        assert kwargs["env"] == {"LC_ALL": "C.UTF-8"}

    def test_nonzero_raises(self, executor: PrivilegedExecutor) -> None:
        """A strict command failing raises ExecutionError with its output."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="partial", stderr="boom", returncode=100)
            with pytest.raises(ExecutionError) as exc_info:
                executor.run(CommandSpec(args=("apt", "list", "--installed")))

        assert exc_info.value.returncode == 100
        assert exc_info.value.output == "partialboom"

    def test_tolerated_nonzero_returns(self, executor: PrivilegedExecutor) -> None:
        """Tolerant commands return whatever they printed."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=1)
            result = executor.run(CommandSpec(args=("apt-cache", "search", "x"), tolerate_nonzero=True))
        assert result.returncode == 1

    def test_require_match_turns_empty_output_into_failure(
        self, executor: PrivilegedExecutor
    ) -> None:
        """A probe whose filtered output is empty fails."""
        spec = CommandSpec(
            args=("dpkg-query", "-W", "vim"),
            line_pattern=re.compile(r"^ii\s"),
            require_match=True,
        )
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="rc  vim\n", stderr="", returncode=0)
            with pytest.raises(ExecutionError):
                executor.run(spec)

    def test_merge_stderr(self, executor: PrivilegedExecutor) -> None:
        """Merged specs return stderr appended to stdout."""
        spec = CommandSpec(args=("x",), merge_stderr=True, tolerate_nonzero=True)
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="a\n", stderr="b\n", returncode=1)
            result = executor.run(spec)
        assert result.stdout == "a\nb\n"
        assert result.stderr == ""

    def test_command_not_found(self, executor: PrivilegedExecutor) -> None:
        """A missing program is an ExecutionError."""
        with patch("pkgbridge.core.executor.run_command", side_effect=FileNotFoundError):
            with pytest.raises(ExecutionError, match="Command not found"):
                executor.run(CommandSpec(args=("nope",)))

    def test_timeout(self, executor: PrivilegedExecutor) -> None:
        """Timeouts keep the partial output."""
        error = subprocess.TimeoutExpired(["x"], 60, output="partial", stderr=b"err")
        with patch("pkgbridge.core.executor.run_command", side_effect=error):
            with pytest.raises(ExecutionTimeoutError) as exc_info:
                executor.run(CommandSpec(args=("x",)))
        assert exc_info.value.stdout == "partial"
        assert exc_info.value.stderr == "err"

    def test_output_limit(self, executor: PrivilegedExecutor) -> None:
        """Capture overflow maps to OutputLimitExceededError."""
        error = CaptureLimitExceeded(1024, "lots", "")
        with patch("pkgbridge.core.executor.run_command", side_effect=error):
            with pytest.raises(OutputLimitExceededError) as exc_info:
                executor.run(CommandSpec(args=("x",)))
        assert exc_info.value.stdout == "lots"

    def test_refuses_privileged_spec(self, executor: PrivilegedExecutor) -> None:
        """run never executes a privileged spec."""
        with pytest.raises(ValueError):
            executor.run(CommandSpec(args=("apt-get", "install", "-y", "x"), privileged=True))


class TestRunPrivileged:
    """Tests for elevated execution."""

    @pytest.fixture
    def spec(self) -> CommandSpec:
        """A privileged install command."""
        return CommandSpec(args=("apt-get", "install", "-y", "htop"), privileged=True)

    def test_credential_checked_then_command_runs_without_stdin(
        self, executor: PrivilegedExecutor, spec: CommandSpec
    ) -> None:
        """Only the sudo check gets the password; the command gets no stdin."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.side_effect = [
                CommandResult(stdout="", stderr="", returncode=0),
                CommandResult(stdout="done\n", stderr="", returncode=0),
            ]
            result = executor.run_privileged(spec, SECRET)

        assert result.stdout == "done\n"
        check, command = mock_run.call_args_list
        assert check[0][0] == ["sudo", "-S", "-k", "-p", "", "-v"]
        assert check[1]["input_text"] == SECRET + "\n"
        assert command[0][0] == ["sudo", "-n", "--", "apt-get", "install", "-y", "htop"]
        assert command[1]["input_text"] is None
        assert command[1]["timeout"] == 900.0
        for call in (check, command):
            assert all(SECRET not in arg for arg in call[0][0])
            assert SECRET not in str(call[1]["env"])

    def test_denied_by_exit_code(self, executor: PrivilegedExecutor, spec: CommandSpec) -> None:
        """A failing sudo check is a refusal whatever sudo printed, and nothing else runs."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="sudo: ???\n", returncode=1)
            with pytest.raises(PrivilegeDeniedError) as exc_info:
                executor.run_privileged(spec, SECRET)

        assert mock_run.call_count == 1
        assert exc_info.value.returncode == 1
        assert SECRET not in str(exc_info.value)
        assert SECRET not in exc_info.value.command

    def test_backend_failure(self, executor: PrivilegedExecutor, spec: CommandSpec) -> None:
        """Failures after a successful check keep the transcript."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.side_effect = [
                CommandResult(stdout="", stderr="", returncode=0),
                CommandResult(
                    stdout="Reading package lists...\n",
                    stderr="E: Unable to locate package htop\n",
                    returncode=100,
                ),
            ]
            with pytest.raises(ExecutionError) as exc_info:
                executor.run_privileged(spec, SECRET)

        assert not isinstance(exc_info.value, PrivilegeDeniedError)
        assert "Unable to locate package" in exc_info.value.output
        assert exc_info.value.command.startswith("sudo ")

    def test_check_timeout_is_execution_timeout(
        self, executor: PrivilegedExecutor, spec: CommandSpec
    ) -> None:
        """A hanging sudo check times out like any command."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(["sudo"], 60.0)
            with pytest.raises(ExecutionTimeoutError):
                executor.run_privileged(spec, SECRET)
        assert mock_run.call_count == 1

    @pytest.mark.parametrize("credential", ["", "two\nlines", "cr\rhere"])
    def test_bad_credential_spawns_nothing(
        self, executor: PrivilegedExecutor, spec: CommandSpec, credential: str
    ) -> None:
        """Unusable credentials are refused before a process starts."""
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            with pytest.raises(InvalidRequestError):
                executor.run_privileged(spec, credential)
        mock_run.assert_not_called()

    def test_refuses_unprivileged_spec(self, executor: PrivilegedExecutor) -> None:
        """run_privileged only runs privileged specs."""
        with pytest.raises(ValueError):
            executor.run_privileged(CommandSpec(args=("apt", "list")), SECRET)

    def test_custom_sudo_path(self, spec: CommandSpec) -> None:
        """The elevation command comes from the config."""
        executor = PrivilegedExecutor(BridgeConfig(sudo_path="/usr/bin/sudo"))
        with patch("pkgbridge.core.executor.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            executor.run_privileged(spec, SECRET)
        assert [call[0][0][0] for call in mock_run.call_args_list] == ["/usr/bin/sudo", "/usr/bin/sudo"]


@pytest.mark.skipif(sys.platform == "win32", reason="needs an executable script")
class TestPasswordlessSudo:
    """Tests against a sudo stand-in that never asks for a password."""

    @pytest.fixture
    def fake_sudo(self, tmp_path: Path) -> str:
        """A sudo that accepts -v silently and execs whatever follows ``--``."""
        script = tmp_path / "sudo"
        script.write_text(
            f"#!{sys.executable}\n"
            "import os, sys\n"
            "args = sys.argv[1:]\n"
            "if '--' not in args:\n"
            "    sys.exit(0)\n"
            "command = args[args.index('--') + 1:]\n"
            "os.execvp(command[0], command)\n"
        )
        script.chmod(0o755)
        return str(script)

    def test_command_never_reads_the_credential(self, fake_sudo: str) -> None:
        """A command that echoes its stdin cannot leak the password."""
        executor = PrivilegedExecutor(BridgeConfig(sudo_path=fake_sudo, locale=""))
        result = executor.run_privileged(CommandSpec(args=("cat",), privileged=True), SECRET)

        assert result.success
        assert SECRET not in result.output


class TestHelpers:
    """Tests for module-level helpers."""

    def test_validate_credential_returns_value(self) -> None:
        """Valid credentials pass through."""
        assert validate_credential("pw") == "pw"
