"""Logging setup for the testbot command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


PROJECT_LOGGER = "testbot"


def configure_logging(level: str | int = logging.WARNING, console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the project logger.

    Calling it again replaces the handler instead of stacking another one.
    """
    logger = logging.getLogger(PROJECT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
