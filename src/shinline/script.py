"""Strict-mode script builder"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from shinline.exceptions import BindingError
from shinline.quoting import ArgList, to_quotable, to_shell_bytes
from shinline.template import CommandString

# Unofficial bash strict mode: fail on errors, unset variables and
# failures anywhere in a pipeline.
STRICT_PREAMBLE = "set -euo pipefail"

SHELL_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


@dataclass(frozen=True)
class StrictScript:
    """Intermediate representation for a strict-mode script - compiles to bash.

    Variable names, values and the body are all checked on construction, so
    an invalid script never exists to be run.
    """

    body: CommandString | bytes | str
    # Bound as quoted shell variables ahead of the body
    variables: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        bad = [name for name in self.variables if not SHELL_NAME.match(name)]
        if bad:
            raise BindingError(
                bad, f"Not valid shell variable names: {', '.join(sorted(bad))}"
            )
        for value in self.variables.values():
            to_quotable(value)
        self._body_bytes()

    def with_variables(self, **values: Any) -> "StrictScript":
        """Return a copy with extra shell variables bound"""
        return StrictScript(body=self.body, variables={**self.variables, **values})

    def _body_bytes(self) -> bytes:
        if isinstance(self.body, CommandString):
            return to_shell_bytes(self.body.data)
        return to_shell_bytes(self.body)

    def compile(self) -> bytes:
        """Compile to a single bash script unit"""
        lines = [STRICT_PREAMBLE.encode()]
        for name, value in self.variables.items():
            quotable = to_quotable(value)
            rendered = quotable.render()
            if isinstance(quotable, ArgList):
                # Lists become bash arrays, never bare words
                rendered = b"(" + rendered + b")"
            lines.append(name.encode() + b"=" + rendered)
        lines.append(b"")
        lines.append(self._body_bytes())
        return b"\n".join(lines)
