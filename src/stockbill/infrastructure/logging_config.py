"""Logging setup for the ``stockbill`` logger hierarchy.

Modules log through ``logging.getLogger(__name__)``; this installs a
single stderr handler on the package logger, once per process.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any

_LOGGER_NAME = "stockbill"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.WARNING,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure the stockbill logger (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
