from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "INFO", *, console: bool = True) -> logging.Logger:
    """Configure the `topic_rss` logger for a host application."""
    logger = logging.getLogger("topic_rss")
    logger.setLevel(_level_from_string(level))
    logger.handlers = []
    logger.propagate = False

    if console:
        handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        handler.setLevel(_level_from_string(level))
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger


def _level_from_string(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)
