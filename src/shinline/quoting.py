"""Quotable values - render host values as inert shell arguments.

Every value substituted into a command goes through `to_quotable`, which maps
it onto one of a small, closed set of variants. Text and paths are quoted with
POSIX single-quote rules on raw bytes, so paths that are not valid UTF-8 keep
their exact byte sequence.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from shinline.exceptions import NotQuotableError

_QUOTE = b"'"
_ESCAPED_QUOTE = b"'\\''"


def to_shell_bytes(value: str | bytes) -> bytes:
    """Encode text for the shell, rejecting what no script or argument can hold.

    Raises:
        NotQuotableError: On NUL bytes or text that has no byte encoding
    """
    if isinstance(value, bytes):
        data = value
    else:
        try:
            data = os.fsencode(value)
        except UnicodeEncodeError as e:
            raise NotQuotableError(value, f"Cannot encode {value!r}: {e.reason}") from e
    if b"\x00" in data:
        raise NotQuotableError(value, "NUL bytes cannot appear in shell text")
    return data


def quote(value: str | bytes) -> bytes:
    """Quote a value as a single POSIX shell word.

    The value is wrapped in single quotes and each embedded single quote
    becomes `'\\''`. Works on bytes, so no decoding is ever required.

    Example:
        >>> quote("it's")
        b"'it'\\\\''s'"
    """
    data = to_shell_bytes(value)
    return _QUOTE + data.replace(_QUOTE, _ESCAPED_QUOTE) + _QUOTE


class Quotable(ABC):
    """A value that knows how to render itself as shell text."""

    @abstractmethod
    def render(self) -> bytes:
        """Return the shell text for this value."""
        pass


@dataclass(frozen=True)
class Text(Quotable):
    """Plain text, quoted as one argument."""

    value: str | bytes

    def render(self) -> bytes:
        return quote(self.value)


@dataclass(frozen=True)
class PathArg(Quotable):
    """A filesystem path, quoted byte-for-byte."""

    value: os.PathLike

    def render(self) -> bytes:
        return quote(os.fsencode(os.fspath(self.value)))


@dataclass(frozen=True)
class Raw(Quotable):
    """Trusted shell text inserted without quoting.

    Never produced by `to_quotable` from a plain value; wrap explicitly.
    """

    value: str | bytes

    def render(self) -> bytes:
        return to_shell_bytes(self.value)


@dataclass(frozen=True)
class ArgList(Quotable):
    """Several arguments, each quoted, separated by single spaces."""

    items: tuple[Quotable, ...] = field(default_factory=tuple)

    def render(self) -> bytes:
        return b" ".join(item.render() for item in self.items)


@dataclass(frozen=True)
class Empty(Quotable):
    """No value at all; renders as nothing."""

    def render(self) -> bytes:
        return b""


def _scalar(value: Any) -> Quotable:
    if isinstance(value, Quotable):
        return value
    if isinstance(value, os.PathLike):
        return PathArg(value)
    if isinstance(value, (str, bytes)):
        return Text(value)
    # bool is an int subclass but has no obvious shell spelling
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Text(str(value))
    raise NotQuotableError(value)


def to_quotable(value: Any) -> Quotable:
    """Convert a host value into its Quotable variant.

    Raises:
        NotQuotableError: If the value has no shell rendering.
    """
    if value is None:
        return Empty()
    if isinstance(value, (list, tuple)):
        quotable: Quotable = ArgList(tuple(_scalar(item) for item in value))
    else:
        quotable = _scalar(value)
    # Surface bad bytes (NUL) at conversion time, not on first render
    quotable.render()
    return quotable
