"""Exception hierarchy for pkgbridge operations.

Every exception carries a stable ``error_type`` code that is used when
errors cross the request/response boundary as structured results.
"""

from __future__ import annotations


class PkgBridgeError(Exception):
    """Base exception for all pkgbridge errors."""

    error_type = "error"


class NoBackendFoundError(PkgBridgeError):
    """Raised when none of the supported package managers is present."""

    error_type = "no_backend_found"

    def __init__(self, message: str = "No supported package manager found") -> None:
        super().__init__(message)


class UnsafeTokenError(PkgBridgeError):
    """Raised when a user-supplied token fails the allow-list check.

    Attributes:
        token: The rejected token.
    """

    error_type = "unsafe_token"

    def __init__(self, token: str, what: str = "package name") -> None:
        self.token = token
        super().__init__(f"Refusing unsafe {what}: {token!r}")


class InvalidRequestError(PkgBridgeError):
    """Raised when a request is malformed (empty names, missing credential, ...)."""

    error_type = "invalid_request"


class OperationInProgressError(PkgBridgeError):
    """Raised when a privileged operation is already running in this session."""

    error_type = "operation_in_progress"

    def __init__(self) -> None:
        super().__init__("Another privileged operation is already in progress")


class ExecutionError(PkgBridgeError):
    """A backend command could not be run to a successful end.

    Attributes:
        command: Display form of the command (never contains the credential).
        stdout: Standard output captured before the failure.
        stderr: Standard error captured before the failure.
        returncode: Exit code, or None if the process never exited normally.
    """

    error_type = "execution_error"

    def __init__(
        self,
        message: str,
        *,
        command: str = "",
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)

    @property
    def output(self) -> str:
        """Combined partial output, stdout first."""
        return self.stdout + self.stderr


class ExecutionTimeoutError(ExecutionError):
    """The command exceeded its timeout and was killed."""

    error_type = "execution_timeout"


class OutputLimitExceededError(ExecutionError):
    """The command produced more output than the capture ceiling allows."""

    error_type = "output_limit_exceeded"


class PrivilegeDeniedError(ExecutionError):
    """The elevation mechanism rejected the credential."""

    error_type = "privilege_denied"
