"""
Logging configuration for the CLI and bulk scripts.

Library modules only create module loggers; handlers are attached here.
"""
from __future__ import annotations

import logging
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO, fmt: Optional[str] = None) -> logging.Handler:
    """
    Attach a console handler to the package logger.

    Args:
        level: Log level (int or name like "DEBUG").
        fmt: Optional format string.

    Returns:
        The attached handler (for later removal).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger = logging.getLogger("exam_toolkit")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def detach_handler(handler: logging.Handler) -> None:
    logging.getLogger("exam_toolkit").removeHandler(handler)
