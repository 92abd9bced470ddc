"""Shell execution utilities.

Provides subprocess execution with bounded output capture, optional
stdin input and a hard timeout. No command is ever run through a shell.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import IO

# 10 MiB, shared between stdout and stderr
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024

_CHUNK_SIZE = 64 * 1024

# Seconds a terminated process gets before it is killed
_KILL_GRACE = 5.0


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stdout first."""
        return self.stdout + self.stderr


class CaptureLimitExceeded(Exception):
    """Raised when a command writes more than the capture ceiling.

    Attributes:
        limit: The ceiling in bytes.
        stdout: Output captured before the process was killed.
        stderr: Error output captured before the process was killed.
    """

    def __init__(self, limit: int, stdout: str, stderr: str) -> None:
        self.limit = limit
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command output exceeded {limit} bytes")


class _BoundedCapture:
    """Collects both pipes of one process under a shared byte ceiling."""

    def __init__(self, limit: int, on_overflow: Callable[[], None]) -> None:
        self._limit = limit
        self._on_overflow = on_overflow
        self._lock = threading.Lock()
        self._total = 0
        self._buffers: dict[str, bytearray] = {"stdout": bytearray(), "stderr": bytearray()}
        self.exceeded = False

    def drain(self, stream: IO[bytes], key: str) -> None:
        for chunk in iter(lambda: stream.read1(_CHUNK_SIZE), b""):  # type: ignore[attr-defined]
            with self._lock:
                if self.exceeded:
                    continue
                room = self._limit - self._total
                if len(chunk) > room:
                    self._buffers[key].extend(chunk[:room])
                    self._total = self._limit
                    self.exceeded = True
                    self._on_overflow()
                    continue
                self._buffers[key].extend(chunk)
                self._total += len(chunk)
        stream.close()

    def text(self, key: str) -> str:
        with self._lock:
            return self._buffers[key].decode("utf-8", errors="replace")


def run_command(
    args: list[str],
    *,
    input_text: str | None = None,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> CommandResult:
    """Execute a command and return its captured output.

    Args:
        args: Command and arguments to execute.
        input_text: Text written to the command's stdin, which is then closed.
            If None, stdin is connected to /dev/null.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        env: Additional environment variables (merged with current env).
        max_output_bytes: Ceiling for stdout and stderr combined.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout. The process is
            killed and the partial output is attached to the exception.
        CaptureLimitExceeded: If the command writes more than max_output_bytes.
            The process is killed.
        FileNotFoundError: If command executable is not found.
    """
    full_env = {**os.environ, **env} if env else None
    process = subprocess.Popen(
        args,
        stdin=subprocess.PIPE if input_text is not None else subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=full_env,
    )
    capture = _BoundedCapture(max_output_bytes, on_overflow=process.terminate)
    readers = [
        threading.Thread(target=capture.drain, args=(process.stdout, "stdout"), daemon=True),
        threading.Thread(target=capture.drain, args=(process.stderr, "stderr"), daemon=True),
    ]
    for reader in readers:
        reader.start()

    if process.stdin is not None:
        try:
            process.stdin.write((input_text or "").encode("utf-8"))
        except BrokenPipeError:
            # Child exited without reading its input
            pass
        finally:
            with contextlib.suppress(BrokenPipeError):
                process.stdin.close()

    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _stop(process)
        _join(readers)
        # An overflowing child that ignored SIGTERM is still an overflow
        if capture.exceeded:
            raise CaptureLimitExceeded(
                max_output_bytes,
                stdout=capture.text("stdout"),
                stderr=capture.text("stderr"),
            ) from None
        raise subprocess.TimeoutExpired(
            args,
            timeout or 0.0,
            output=capture.text("stdout"),
            stderr=capture.text("stderr"),
        ) from None

    if capture.exceeded:
        _stop(process)
        _join(readers)
        raise CaptureLimitExceeded(
            max_output_bytes,
            stdout=capture.text("stdout"),
            stderr=capture.text("stderr"),
        )

    _join(readers)
    # The ceiling may be crossed by the last chunks read after exit
    if capture.exceeded:
        raise CaptureLimitExceeded(
            max_output_bytes,
            stdout=capture.text("stdout"),
            stderr=capture.text("stderr"),
        )

    return CommandResult(
        stdout=capture.text("stdout"),
        stderr=capture.text("stderr"),
        returncode=returncode,
    )


def _stop(process: subprocess.Popen[bytes]) -> None:
    """Terminate a process, killing it if it ignores the request.

    SIGTERM is tried first because sudo relays it to the command it runs,
    while SIGKILL would only reach sudo itself.
    """
    if process.poll() is None:
        process.terminate()
    try:
        process.wait(timeout=_KILL_GRACE)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def _join(readers: list[threading.Thread]) -> None:
    """Wait for the pipe readers, bounded in case a grandchild holds a pipe open."""
    for reader in readers:
        reader.join(timeout=_KILL_GRACE)


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
