"""Logging setup for the listener, its handlers, and the CLI."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# HTTP and Sheets client libraries log every request at DEBUG.
_CHATTY_LOGGERS = ("urllib3", "gspread")


def configure_logging(level: str | None = None) -> int:
    """Initialize logging for an importflow run and return the numeric level.

    The level comes from ``level`` or the ``LOG_LEVEL`` environment variable
    (defaults to ``INFO``). Unknown level names raise ``ValueError``. Third-party
    HTTP loggers stay at ``WARNING`` unless the run asks for ``DEBUG``.
    """

    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level {name!r}")

    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    for logger_name in _CHATTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING)
    return resolved
