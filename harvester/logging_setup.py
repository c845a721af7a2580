"""Console logging for the simulator."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def setup_logging(level: str = "INFO", *, console: Console | None = None) -> None:
    """Route the package's loggers through a single rich handler."""
    normalized = level.upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; use one of {LOG_LEVELS}.")
    logger = logging.getLogger("harvester")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(normalized)
    logger.propagate = False
