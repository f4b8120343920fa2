"""
Structured logging for medisave.

Thin layer over the standard library ``logging`` module. Every module
takes a logger with ``get_logger(__name__)`` and passes structured
context through ``extra``:

    _logger = get_logger(__name__)
    _logger.info("Debit confirmed", extra={"operation": "SAVE", "tx_hash": tx_hash})

Nothing is emitted until the host calls ``configure_logging``; the
package logger carries a NullHandler so library use stays silent.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "medisave"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s - %(message)s%(context)s"
_CONTEXT_KEYS = (
    "operation",
    "workflow",
    "step",
    "method",
    "chain_id",
    "network",
    "tx_hash",
    "cid",
    "document",
    "backend",
)

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


class ContextFilter(logging.Filter):
    """Render the known ``extra`` keys as a trailing ``key=value`` list."""

    def filter(self, record: logging.LogRecord) -> bool:
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in _CONTEXT_KEYS
            if getattr(record, key, None) is not None
        ]
        record.context = f" ({', '.join(pairs)})" if pairs else ""
        return True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the medisave namespace.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    fmt: Optional[str] = None,
    stream=None,
) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Calling this twice replaces the handler instead of duplicating output.

    Args:
        level: Log level (name or number)
        fmt: Optional format string
        stream: Output stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_medisave_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.addFilter(ContextFilter())
    handler._medisave_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    set_level(level)
    return logger


def set_level(level: Union[int, str]) -> None:
    """Set the package log level."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def disable_logging() -> None:
    """Silence all package logging."""
    logging.getLogger(ROOT_LOGGER_NAME).disabled = True


def enable_debug() -> None:
    """Re-enable logging at DEBUG level."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.disabled = False
    logger.setLevel(logging.DEBUG)
