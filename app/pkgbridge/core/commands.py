"""Command specifications produced by backends.

A CommandSpec is an argument vector plus the post-processing a shell
pipeline would otherwise have done (``grep``, ``head``, ``2>&1``). The
executor applies that post-processing to the captured output.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Description of one backend command.

    Attributes:
        args: Argument vector, never run through a shell.
        privileged: The command must run elevated; the executor prefixes the
            elevation command and pipes the credential into its stdin.
        tolerate_nonzero: A non-zero exit still returns the captured output.
        merge_stderr: Append stderr to stdout in the returned output.
        line_pattern: Keep only stdout lines matching this pattern.
        require_match: Treat an empty filtered stdout as a non-zero exit.
        max_lines: Keep only the first N stdout lines.
    """

    args: tuple[str, ...]
    privileged: bool = False
    tolerate_nonzero: bool = False
    merge_stderr: bool = False
    line_pattern: re.Pattern[str] | None = None
    require_match: bool = False
    max_lines: int | None = None

    def __post_init__(self) -> None:
        """Validate the command after initialization."""
        if not self.args:
            msg = "Command arguments cannot be empty"
            raise ValueError(msg)
        if self.require_match and self.line_pattern is None:
            msg = "require_match needs a line_pattern"
            raise ValueError(msg)

    @property
    def executable(self) -> str:
        """Return the program this command runs."""
        return self.args[0]

    def display(self) -> str:
        """Return a shell-quoted form of the command for logs and errors."""
        return shlex.join(self.args)

    def filter_output(self, text: str) -> str:
        """Apply the line filter and line cap to captured stdout."""
        if self.line_pattern is None and self.max_lines is None:
            return text

        lines = text.splitlines()
        if self.line_pattern is not None:
            lines = [line for line in lines if self.line_pattern.search(line)]
        if self.max_lines is not None:
            lines = lines[: self.max_lines]
        return "\n".join(lines) + "\n" if lines else ""
