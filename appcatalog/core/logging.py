"""Logging setup for App Catalog.

Every module logs through a child of the ``appcatalog`` logger
(``logging.getLogger("appcatalog.<module>")``); the command line entry point
calls ``setup_logging`` once to attach handlers to that parent.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

__all__ = ["logger", "setup_logging"]

logger = logging.getLogger("appcatalog")

_CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s (%(module)s:%(lineno)d): %(message)s"

# Third-party loggers that are only useful when debugging
_NOISY_LOGGERS = ("urllib3", "requests")


def _owned_handlers() -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_appcatalog", False)]


def setup_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Attach console (stderr) and optional file output to the package logger.

    Safe to call more than once: handlers added by an earlier call are
    replaced, so a later call can change the level or the log file.

    Args:
        level: Console level. DEBUG also switches to a format with source
            locations and lets HTTP library chatter through.
        log_file: If given, everything down to DEBUG is appended there.
    """
    for handler in _owned_handlers():
        logger.removeHandler(handler)
        handler.close()

    verbose = level <= logging.DEBUG
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_DEBUG_FORMAT if verbose else _CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_DEBUG_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler._appcatalog = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    # The package logger must pass DEBUG records on to the file handler.
    logger.setLevel(logging.DEBUG if log_file is not None else level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
