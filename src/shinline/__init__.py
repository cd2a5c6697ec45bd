"""Shinline - quoted shell command templates run in bash strict mode"""

from shinline.command import CommandSpec, command, commandify, execute
from shinline.config import ExecConfig
from shinline.exceptions import (
    BindingError,
    CommandParseError,
    ExecutionError,
    ExecutionIOError,
    NonZeroExit,
    NotQuotableError,
    ShinlineError,
    SpawnError,
    TemplateSyntaxError,
)
from shinline.quoting import (
    ArgList,
    Empty,
    PathArg,
    Quotable,
    Raw,
    Text,
    quote,
    to_quotable,
)
from shinline.runner import ExecutionResult, ShellCommand, bash, bash_command, run
from shinline.script import STRICT_PREAMBLE, StrictScript
from shinline.template import (
    CommandString,
    CommandTemplate,
    Literal,
    Placeholder,
    compile,
)
from shinline.utils import setup_logging

__version__ = "0.1.0"

__all__ = [
    # template
    "CommandString",
    "CommandTemplate",
    "Literal",
    "Placeholder",
    "compile",
    # quoting
    "ArgList",
    "Empty",
    "PathArg",
    "Quotable",
    "Raw",
    "Text",
    "quote",
    "to_quotable",
    # execution
    "ExecConfig",
    "ExecutionResult",
    "STRICT_PREAMBLE",
    "ShellCommand",
    "StrictScript",
    "bash",
    "bash_command",
    "run",
    # direct commands
    "CommandSpec",
    "command",
    "commandify",
    "execute",
    # errors
    "BindingError",
    "CommandParseError",
    "ExecutionError",
    "ExecutionIOError",
    "NonZeroExit",
    "NotQuotableError",
    "ShinlineError",
    "SpawnError",
    "TemplateSyntaxError",
    # logging
    "setup_logging",
]
