"""Command templates with quoted placeholder substitution.

Placeholders use the GitHub Actions-style ${{ name }} syntax so that shell
variables ($VAR, ${VAR}) in the surrounding text stay untouched. Lookup is by
name only: no dotted paths, no defaults, no filters.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from shinline.exceptions import BindingError, TemplateSyntaxError
from shinline.quoting import to_quotable, to_shell_bytes

log = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$\{\{\s*([^}]*?)\s*\}\}")
IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


@dataclass(frozen=True)
class Literal:
    """Template text copied verbatim into the command."""

    text: str | bytes


@dataclass(frozen=True)
class Placeholder:
    """A named slot replaced by a quoted value."""

    name: str

    def __post_init__(self) -> None:
        if not IDENTIFIER.match(self.name):
            raise TemplateSyntaxError(self.name)


Segment = Literal | Placeholder


@dataclass(frozen=True)
class CommandString:
    """Finished, fully quoted shell text."""

    data: bytes

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        return os.fsdecode(self.data)


@dataclass
class CommandTemplate:
    """Ordered literal and placeholder segments.

    Build with `parse()` or by chaining `literal()` / `placeholder()`:

        >>> t = CommandTemplate().literal("ls -l ").placeholder("path")
        >>> str(t.compile({"path": "my dir"}))
        "ls -l 'my dir'"
    """

    segments: list[Segment] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "CommandTemplate":
        """Split text on ${{ name }} placeholders."""
        template = cls()
        pos = 0
        for match in PLACEHOLDER.finditer(text):
            if match.start() > pos:
                template.literal(text[pos : match.start()])
            name = match.group(1)
            if not IDENTIFIER.match(name):
                raise TemplateSyntaxError(match.group(0))
            template.placeholder(name)
            pos = match.end()
        if pos < len(text):
            template.literal(text[pos:])
        return template

    def append(self, segment: Segment) -> "CommandTemplate":
        if not isinstance(segment, (Literal, Placeholder)):
            raise TypeError(f"Not a template segment: {segment!r}")
        self.segments.append(segment)
        return self

    def literal(self, text: str | bytes) -> "CommandTemplate":
        return self.append(Literal(text))

    def placeholder(self, name: str) -> "CommandTemplate":
        return self.append(Placeholder(name))

    @property
    def placeholders(self) -> list[str]:
        """Placeholder names in first-appearance order, without repeats."""
        seen: dict[str, None] = {}
        for segment in self.segments:
            if isinstance(segment, Placeholder):
                seen.setdefault(segment.name)
        return list(seen)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def compile(self, bindings: Mapping[str, Any]) -> CommandString:
        return compile(self, bindings)


def compile(
    template: CommandTemplate | str, bindings: Mapping[str, Any]
) -> CommandString:
    """Substitute quoted bindings into a template.

    All placeholders are validated before anything is rendered, so a failure
    here always happens before a process could be spawned.

    Args:
        template: A CommandTemplate, or text to parse as one
        bindings: Placeholder name -> value

    Returns:
        The quoted command text

    Raises:
        TemplateSyntaxError: If template text has a malformed placeholder
        BindingError: If any placeholder has no binding
        NotQuotableError: If a bound value cannot be quoted, or literal text
            holds a NUL byte
    """
    if isinstance(template, str):
        template = CommandTemplate.parse(template)

    names = template.placeholders
    missing = [name for name in names if name not in bindings]
    if missing:
        raise BindingError(missing)

    rendered = {name: to_quotable(bindings[name]).render() for name in names}

    unused = set(bindings) - set(names)
    if unused:
        log.debug(f"Ignoring unused bindings: {', '.join(sorted(unused))}")

    parts: list[bytes] = []
    for segment in template:
        if isinstance(segment, Placeholder):
            parts.append(rendered[segment.name])
        else:
            parts.append(to_shell_bytes(segment.text))
    return CommandString(b"".join(parts))
