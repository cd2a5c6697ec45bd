"""Shared utilities"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

DEBUG_ENV = "SHINLINE_DEBUG"


def _resolve_level(verbose: bool) -> int:
    if os.environ.get(DEBUG_ENV):
        return logging.DEBUG
    return logging.INFO if verbose else logging.WARNING


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Send the "shinline" logger to stderr through rich.

    By default only warnings get through. `verbose` adds non-zero exits; setting
    SHINLINE_DEBUG in the environment overrides both and prints every compiled
    script along with the source location of each record.
    """
    level = _resolve_level(verbose)

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=level == logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("shinline")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
    return logger
