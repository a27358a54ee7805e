"""Logging configuration shared by the narrsync package and CLI."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = logging.INFO

_LOGGING_CONFIGURED = False


def _resolve_level(level: str | int | None) -> int:
    """Resolves an explicit level, then ``LOG_LEVEL``, then the default."""
    candidate: str | int | None = level
    if candidate is None:
        candidate = os.getenv("LOG_LEVEL")
    if candidate is None or candidate == "":
        return DEFAULT_LOG_LEVEL
    if isinstance(candidate, int):
        return candidate
    resolved = logging.getLevelName(candidate.strip().upper())
    return resolved if isinstance(resolved, int) else DEFAULT_LOG_LEVEL


def configure_logging(level: str | int | None = None) -> int:
    """Configures root logging once and applies the resolved level.

    Args:
        level: Explicit level name or number. Overrides ``LOG_LEVEL``.

    Returns:
        The numeric level applied to the root logger.
    """
    global _LOGGING_CONFIGURED
    resolved = _resolve_level(level)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(format=LOG_FORMAT, level=resolved)
    root_logger.setLevel(resolved)
    for handler in root_logger.handlers:
        handler.setLevel(resolved)
    _LOGGING_CONFIGURED = True
    return resolved


def get_logger(name: str) -> logging.Logger:
    """Returns a module logger, configuring logging from the environment once."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return logging.getLogger(name)
