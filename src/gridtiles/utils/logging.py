"""Logging helpers shared across the package."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_PACKAGE_LOGGER = "gridtiles"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or one of its children when *name* is set."""

    if name:
        return logging.getLogger(f"{_PACKAGE_LOGGER}.{name}")
    return logging.getLogger(_PACKAGE_LOGGER)


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a :class:`RichHandler` to the package logger.

    Repeated calls only adjust the level so the CLI can be invoked several
    times within one process (as the tests do) without duplicating output.
    """

    logger = get_logger()
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


__all__ = ["get_logger", "configure_logging"]
