"""Command execution with optional privilege elevation.

The executor turns a CommandSpec into a running process, applies its
output post-processing and maps every failure mode onto the
ExecutionError family. Privileged commands run in two steps: the
credential is checked by ``sudo -S -k -v``, which reads it from stdin,
and the command then runs under ``sudo -n`` with stdin at /dev/null, so
the package manager never receives it. The credential never appears in
argv, the environment, a log record or an exception.
"""

from __future__ import annotations

import logging
import subprocess

from pkgbridge.core.commands import CommandSpec
from pkgbridge.core.config import BridgeConfig
from pkgbridge.core.errors import (
    ExecutionError,
    ExecutionTimeoutError,
    InvalidRequestError,
    OutputLimitExceededError,
    PrivilegeDeniedError,
)
from pkgbridge.utils.shell import CaptureLimitExceeded, CommandResult, run_command

logger = logging.getLogger(__name__)


class PrivilegedExecutor:
    """Runs backend commands and captures their output.

    Attributes:
        config: Limits and environment applied to every command.
    """

    def __init__(self, config: BridgeConfig | None = None) -> None:
        """Initialize the executor.

        Args:
            config: Execution settings. If None, defaults are used.
        """
        self.config = config or BridgeConfig()

    def run(self, spec: CommandSpec) -> CommandResult:
        """Run a read-only command.

        Args:
            spec: Non-privileged command specification.

        Returns:
            CommandResult with filtered stdout. For specs that tolerate a
            non-zero exit, the result is returned whatever the exit code.

        Raises:
            ValueError: If the spec is privileged.
            ExecutionError: If the command cannot be spawned or fails.
            ExecutionTimeoutError: If the command exceeds its timeout.
            OutputLimitExceededError: If the command writes too much output.
        """
        if spec.privileged:
            msg = f"Privileged command needs a credential: {spec.display()}"
            raise ValueError(msg)

        raw = self._execute(
            list(spec.args),
            spec.display(),
            input_text=None,
            timeout=self.config.read_timeout_seconds,
        )
        result = _post_process(raw, spec)

        if not result.success and not spec.tolerate_nonzero:
            raise ExecutionError(
                f"Command failed with exit code {result.returncode}: {spec.display()}",
                command=spec.display(),
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result

    def run_privileged(self, spec: CommandSpec, credential: str) -> CommandResult:
        """Run a command with elevated rights.

        Args:
            spec: Privileged command specification.
            credential: Password fed to the elevation check via stdin.

        Returns:
            CommandResult of a successful run.

        Raises:
            ValueError: If the spec is not privileged.
            InvalidRequestError: If the credential is empty or spans lines.
            PrivilegeDeniedError: If sudo rejected the credential.
            ExecutionError: If the command cannot be spawned or fails.
            ExecutionTimeoutError: If the command exceeds its timeout.
            OutputLimitExceededError: If the command writes too much output.
        """
        if not spec.privileged:
            msg = f"Command is not privileged: {spec.display()}"
            raise ValueError(msg)
        validate_credential(credential)

        self._authenticate(credential)

        display = f"{self.config.sudo_path} {spec.display()}"
        raw = self._execute(
            [self.config.sudo_path, "-n", "--", *spec.args],
            display,
            input_text=None,
            timeout=self.config.privileged_timeout_seconds,
        )
        result = _post_process(raw, spec)
        if result.success:
            return result

        raise ExecutionError(
            f"Command failed with exit code {result.returncode}: {display}",
            command=display,
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )

    def _authenticate(self, credential: str) -> None:
        """Check the credential with sudo, ignoring any cached timestamp.

        Raises:
            PrivilegeDeniedError: If sudo exits non-zero.
        """
        display = f"{self.config.sudo_path} -v"
        raw = self._execute(
            [self.config.sudo_path, "-S", "-k", "-p", "", "-v"],
            display,
            input_text=credential + "\n",
            timeout=self.config.read_timeout_seconds,
        )
        if raw.success:
            return
        raise PrivilegeDeniedError(
            "Administrator password was rejected",
            command=display,
            stderr=raw.stderr,
            returncode=raw.returncode,
        )

    def _execute(
        self,
        args: list[str],
        display: str,
        *,
        input_text: str | None,
        timeout: float,
    ) -> CommandResult:
        """Spawn the process and translate low-level failures."""
        logger.info("Executing: %s", display)

        try:
            raw = run_command(
                args,
                input_text=input_text,
                timeout=timeout,
                env=self.config.child_env,
                max_output_bytes=self.config.max_output_bytes,
            )
        except FileNotFoundError as e:
            raise ExecutionError(
                f"Command not found: {args[0]}",
                command=display,
            ) from e
        except subprocess.TimeoutExpired as e:
            logger.warning("Command timed out after %.0fs: %s", timeout, display)
            raise ExecutionTimeoutError(
                f"Command timed out after {timeout:.0f}s: {display}",
                command=display,
                stdout=_as_text(e.output),
                stderr=_as_text(e.stderr),
            ) from None
        except CaptureLimitExceeded as e:
            logger.warning("Command output exceeded %d bytes: %s", e.limit, display)
            raise OutputLimitExceededError(
                f"Command output exceeded {e.limit} bytes: {display}",
                command=display,
                stdout=e.stdout,
                stderr=e.stderr,
            ) from None
        except OSError as e:
            raise ExecutionError(f"Cannot run {args[0]}: {e}", command=display) from e

        logger.debug("Command exited with %d: %s", raw.returncode, display)
        return raw


def _post_process(raw: CommandResult, spec: CommandSpec) -> CommandResult:
    """Apply the CommandSpec's output filters to a finished command."""
    stdout = spec.filter_output(raw.stdout)
    stderr = raw.stderr
    returncode = raw.returncode

    if spec.require_match and returncode == 0 and not stdout.strip():
        returncode = 1

    if spec.merge_stderr:
        stdout, stderr = stdout + stderr, ""

    return CommandResult(stdout=stdout, stderr=stderr, returncode=returncode)


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def validate_credential(credential: str) -> str:
    """Check that a credential can be written to the elevation prompt.

    Raises:
        InvalidRequestError: If the credential is empty, not a string or spans lines.
    """
    if not isinstance(credential, str) or not credential:
        msg = "A non-empty administrator password is required"
        raise InvalidRequestError(msg)
    if "\n" in credential or "\r" in credential:
        msg = "Administrator password cannot contain line breaks"
        raise InvalidRequestError(msg)
    return credential
