"""Logging utilities for pymongo-legacy.

The invocation core logs one DEBUG message per adapted call. Those messages
live under :data:`DISPATCH_LOGGER` and are hidden unless asked for, so
``level="DEBUG"`` stays readable for the rest of the package.
"""

import logging
import sys
from typing import Any

PACKAGE_LOGGER = "pymongo_legacy"
DISPATCH_LOGGER = "pymongo_legacy.adapter"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def set_dispatch_logging(enabled: bool) -> None:
    """Show or hide the per-call messages of the adapter layer.

    Args:
        enabled: Log every dispatched call at DEBUG when True. When False the
            adapter layer follows the package level, but never below INFO
    """
    if enabled:
        level = logging.DEBUG
    else:
        level = max(logging.INFO, logging.getLogger(PACKAGE_LOGGER).getEffectiveLevel())
    logging.getLogger(DISPATCH_LOGGER).setLevel(level)


def setup_logging(
    level: str = "INFO",
    format_string: str | None = None,
    stream: Any = None,
    log_dispatch: bool = False,
) -> logging.Logger:
    """Set up logging configuration for applications using pymongo-legacy.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string for log messages
        stream: Output stream for logging (defaults to stderr)
        log_dispatch: Also log each awaitable or callback dispatch

    Returns:
        The ``pymongo_legacy`` package logger

    Raises:
        ValueError: If ``level`` is not a logging level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format=format_string or DEFAULT_FORMAT,
        stream=stream if stream is not None else sys.stderr,
        force=True,
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    set_dispatch_logging(log_dispatch)

    return logger
