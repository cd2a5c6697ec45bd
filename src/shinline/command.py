"""Direct commands - parse command text into an argv invocation.

Unlike `bash`, no shell runs the result. The text is split with shlex into a
program and its arguments. It may start with a `cd DIR` line and `export
NAME=VALUE` lines, which set the child's working directory and environment:

    cd /srv/app
    export MODE=release LEVEL=3
    make ${{ target }}
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from shinline.exceptions import CommandParseError
from shinline.runner import ExecutionResult, spawn
from shinline.template import CommandString, CommandTemplate, compile

log = logging.getLogger(__name__)


class _Section(Enum):
    CD = "cd"
    ENV = "env"
    CMD = "cmd"


@dataclass(frozen=True)
class CommandSpec:
    """A program invocation with its own environment and working directory"""

    binary: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    cwd: str | None = None

    @property
    def argv(self) -> list[str]:
        return [self.binary, *self.args]

    def run(self, check: bool = True, capture: bool = False) -> ExecutionResult:
        env = None
        if self.env:
            env = os.environ.copy()
            env.update(self.env)
        return spawn(self.argv, capture=capture, check=check, cwd=self.cwd, env=env)

    def output(self) -> ExecutionResult:
        """Run with output captured, without raising on failure"""
        return self.run(check=False, capture=True)


def _parse_export(words: list[str]) -> dict[str, str]:
    if len(words) < 2:
        raise CommandParseError(
            "Not enough arguments in export; expected at least 1, found 0"
        )
    env: dict[str, str] = {}
    for item in words[1:]:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise CommandParseError(
                f"Expected export of the format NAME=VALUE, got {item!r}"
            )
        env[name] = value
    return env


def commandify(text: CommandString | str) -> CommandSpec:
    """Parse command text into a CommandSpec.

    Raises:
        CommandParseError: On a misplaced or malformed cd/export line, or
            when no command is found
    """
    if isinstance(text, CommandString):
        text = str(text)

    env: dict[str, str] = {}
    cwd: str | None = None
    section = _Section.CD
    command_lines: list[str] = []

    for raw_line in text.strip().split("\n"):
        if section is _Section.CMD:
            command_lines.append(raw_line)
            continue
        if not raw_line.strip():
            continue

        try:
            words = shlex.split(raw_line)
        except ValueError:
            # Unbalanced quotes may continue on the next line
            words = []

        head = words[0] if words else None
        if head == "cd":
            if section is not _Section.CD:
                raise CommandParseError("cd must be the first line of a command")
            if len(words) != 2:
                raise CommandParseError(
                    f"Wrong number of arguments in cd; expected 1, found {len(words) - 1}"
                )
            cwd = words[1]
            section = _Section.ENV
        elif head == "export":
            env.update(_parse_export(words))
            section = _Section.ENV
        else:
            command_lines.append(raw_line)
            section = _Section.CMD

    if not command_lines:
        raise CommandParseError("No command found")

    command_string = "\n".join(command_lines).replace("\\\n", "\n")
    try:
        argv = shlex.split(command_string)
    except ValueError as e:
        raise CommandParseError(f"Command could not be parsed: {e}") from e
    if not argv:
        raise CommandParseError("No command found")

    spec = CommandSpec(binary=argv[0], args=argv[1:], env=env, cwd=cwd)
    log.debug(f"Parsed command: {shlex.join(spec.argv)} (cwd: {cwd or '.'})")
    return spec


def command(template: CommandTemplate | str, /, **bindings: Any) -> CommandSpec:
    """Compile a template and parse it into a CommandSpec"""
    return commandify(compile(template, bindings))


def execute(
    template: CommandTemplate | str, /, **bindings: Any
) -> ExecutionResult:
    """Compile, parse and run a command, raising NonZeroExit if it fails"""
    return command(template, **bindings).run(check=True)
