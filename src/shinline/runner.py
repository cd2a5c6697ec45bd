"""Runner - executes strict-mode shell scripts as subprocesses"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from shinline.config import ExecConfig
from shinline.exceptions import ExecutionIOError, NonZeroExit, SpawnError
from shinline.script import StrictScript
from shinline.template import CommandString, CommandTemplate, compile

log = logging.getLogger(__name__)

Arg = str | bytes | os.PathLike


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a finished process.

    stdout/stderr are None when the streams were inherited rather than captured.
    """

    argv: tuple[Arg, ...]
    returncode: int
    stdout: bytes | None = None
    stderr: bytes | None = None

    @property
    def program(self) -> str:
        return os.fsdecode(self.argv[0])

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> "ExecutionResult":
        """Raise NonZeroExit unless the process succeeded"""
        if not self.ok:
            raise NonZeroExit(self)
        return self

    def text(self, stream: Literal["stdout", "stderr"] = "stdout") -> str:
        """Decode captured output; empty string if it was not captured"""
        data = self.stdout if stream == "stdout" else self.stderr
        return data.decode(errors="replace") if data else ""


def spawn(
    argv: Sequence[Arg],
    *,
    capture: bool = False,
    check: bool = True,
    cwd: str | os.PathLike | None = None,
    env: Mapping[str, str] | None = None,
) -> ExecutionResult:
    """Run argv to completion.

    The process handle and any pipes are released before returning, whether
    the call succeeds or raises.

    Args:
        argv: Program and arguments, passed without any shell parsing
        capture: Capture stdout/stderr instead of inheriting them
        check: Raise NonZeroExit on a non-zero exit status
        cwd: Working directory for the child
        env: Full environment for the child (None = inherit)

    Returns:
        ExecutionResult

    Raises:
        SpawnError: If the program could not be started, or argv, env or
            cwd hold a NUL byte
        ExecutionIOError: If communicating with the process failed
        NonZeroExit: If check is set and the process failed
    """
    argv = tuple(argv)
    program = os.fsdecode(argv[0])
    pipe = subprocess.PIPE if capture else None

    log.debug(f"Spawning {program} (capture: {capture}, cwd: {cwd or '.'})")

    try:
        process = subprocess.Popen(argv, stdout=pipe, stderr=pipe, cwd=cwd, env=env)
    except (OSError, ValueError) as e:
        # ValueError: a NUL byte in argv, env or cwd
        raise SpawnError(program, e) from e

    with process:
        try:
            stdout, stderr = process.communicate()
        except OSError as e:
            raise ExecutionIOError(program, e) from e

    result = ExecutionResult(
        argv=argv, returncode=process.returncode, stdout=stdout, stderr=stderr
    )
    if result.ok:
        log.debug(f"{program} exited successfully")
    else:
        log.info(f"{program} failed (exit code {result.returncode})")

    if check:
        result.check()
    return result


@dataclass(frozen=True)
class ShellCommand:
    """A strict-mode script ready to run, not yet spawned.

    The whole script travels as the single `-c` argument, so its bytes reach
    the shell unchanged. `args` become the positional parameters ($1, $2, ...).
    """

    script: StrictScript
    config: ExecConfig = field(default_factory=ExecConfig)
    args: tuple[Arg, ...] = ()

    @property
    def argv(self) -> list[Arg]:
        argv: list[Arg] = [self.config.shell, "-c", self.script.compile()]
        if self.args:
            argv += [self.config.shell, *self.args]
        return argv

    def _spawn(self, capture: bool, check: bool) -> ExecutionResult:
        argv = self.argv
        log.debug(f"Running script:\n{os.fsdecode(argv[2])}")
        return spawn(argv, capture=capture, check=check)

    def run(self, check: bool = True) -> ExecutionResult:
        return self._spawn(capture=self.config.capture_output, check=check)

    def output(self) -> ExecutionResult:
        """Run with output captured, without raising on failure"""
        return self._spawn(capture=True, check=False)

    def status(self) -> int:
        """Run and return only the exit status"""
        return self.run(check=False).returncode


def run(
    command: StrictScript | CommandString | bytes | str,
    config: ExecConfig | None = None,
    *,
    check: bool = True,
) -> ExecutionResult:
    """Run finished command text under strict mode.

    Args:
        command: Command text (already quoted) or a StrictScript
        config: Shell binary and capture settings
        check: Raise NonZeroExit on failure; otherwise return the result as is

    Returns:
        ExecutionResult
    """
    script = command if isinstance(command, StrictScript) else StrictScript(command)
    return ShellCommand(script, config or ExecConfig()).run(check=check)


def bash_command(
    template: CommandTemplate | str,
    /,
    *,
    variables: Mapping[str, Any] | None = None,
    config: ExecConfig | None = None,
    **bindings: Any,
) -> ShellCommand:
    """Compile a template into a strict-mode ShellCommand without running it.

    Placeholders are filled from `bindings`; `variables` are bound as quoted
    shell variables ahead of the script. `variables` and `config` are
    reserved, so use CommandTemplate.compile for placeholders with those names.

    Example:
        >>> cmd = bash_command("test -d ${{ path }}", path=Path("/tmp"))
        >>> cmd.status()
        0
    """
    body = compile(template, bindings)
    return ShellCommand(
        StrictScript(body, dict(variables or {})), config or ExecConfig()
    )


def bash(
    template: CommandTemplate | str,
    /,
    *,
    variables: Mapping[str, Any] | None = None,
    config: ExecConfig | None = None,
    **bindings: Any,
) -> ExecutionResult:
    """Compile and run a template, raising NonZeroExit if it fails"""
    return bash_command(
        template, variables=variables, config=config, **bindings
    ).run(check=True)
