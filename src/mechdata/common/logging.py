"""Logging setup for the mechdata command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Per-request lines from the HTTP stack drown out fetch progress.
CHATTY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI runs.

    Below DEBUG the HTTP libraries only report warnings, so a MUL fetch logs one line
    per partition instead of one per request. ``force`` replaces existing handlers.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
