"""Shinline Exceptions

Errors raised while building and running strict-mode shell commands.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shinline.runner import ExecutionResult


class ShinlineError(Exception):
    """Base exception for all shinline errors."""

    pass


class TemplateSyntaxError(ShinlineError, ValueError):
    """Raised when a template contains a malformed placeholder."""

    def __init__(self, placeholder: str, reason: str = "not a valid name"):
        self.placeholder = placeholder
        super().__init__(f"Invalid placeholder {placeholder!r}: {reason}")


class BindingError(ShinlineError, LookupError):
    """Raised when placeholders have no bound value."""

    def __init__(self, names: Iterable[str], message: str | None = None):
        self.names = sorted(set(names))
        super().__init__(
            message or f"No value bound for placeholder(s): {', '.join(self.names)}"
        )


class NotQuotableError(ShinlineError, TypeError):
    """Raised when a value cannot be rendered as one shell argument."""

    def __init__(self, value: Any, reason: str | None = None):
        self.value = value
        super().__init__(
            reason or f"Cannot quote value of type {type(value).__name__}: {value!r}"
        )


class CommandParseError(ShinlineError, ValueError):
    """Raised when command text cannot be parsed into an invocation."""

    pass


class ExecutionError(ShinlineError):
    """Base exception for failures while running a command."""

    pass


class SpawnError(ExecutionError):
    """Raised when the process could not be started."""

    def __init__(self, program: str, cause: OSError | ValueError):
        self.program = program
        self.cause = cause
        super().__init__(f"Failed to spawn {program!r}: {cause}")


class NonZeroExit(ExecutionError):
    """Raised when a command ran to completion but reported failure."""

    def __init__(self, result: ExecutionResult):
        self.result = result
        self.returncode = result.returncode
        self.stdout = result.stdout
        self.stderr = result.stderr
        message = f"Process {result.program!r} failed with exit code {result.returncode}"
        if result.stderr:
            tail = result.stderr.decode(errors="replace").strip().splitlines()[-1:]
            if tail:
                message += f": {tail[0]}"
        super().__init__(message)


class ExecutionIOError(ExecutionError):
    """Raised when reading or writing the process streams fails."""

    def __init__(self, program: str, cause: OSError):
        self.program = program
        self.cause = cause
        super().__init__(f"I/O error while running {program!r}: {cause}")
