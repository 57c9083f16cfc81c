"""Logging setup for the command-line entry points."""

from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Route the ``tierclick`` logger tree through a rich console handler."""
    logger = logging.getLogger("tierclick")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
