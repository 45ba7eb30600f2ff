"""Logging helpers using Rich.

Log records go to stderr so they never interleave with command output on
stdout. Verbosity is set once on the ``climber_registry`` package logger.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE = "climber_registry"

_CONFIGURED = False


def _install_handler() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger().addHandler(handler)
    logging.getLogger(PACKAGE).setLevel(logging.INFO)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger that reports through the shared Rich handler."""
    _install_handler()
    return logging.getLogger(name)


def set_level(level: int | str) -> None:
    """Apply ``level`` to every ``climber_registry`` logger."""

    get_logger(PACKAGE).setLevel(level.upper() if isinstance(level, str) else level)
