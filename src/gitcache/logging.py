"""Structured logging for gitcache.

Logs go to stderr so stdout stays clean for the JSON result printed by
the CLI.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

LEVEL_VAR = "GITCACHE_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

# Cache configured loggers
_loggers: dict[str, logging.Logger] = {}


class _StderrHandler(logging.StreamHandler):
    """StreamHandler bound to whatever ``sys.stderr`` is at emit time.

    Loggers are created at import, before a caller or test harness may
    swap ``sys.stderr``; binding late keeps error lines visible there.
    """

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self) -> TextIO:  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value: TextIO) -> None:
        pass


def resolve_level(level_name: str | None) -> int:
    """Map a level name to a logging level, falling back to DEFAULT_LEVEL."""
    level = getattr(logging, (level_name or DEFAULT_LEVEL).upper(), None)
    if not isinstance(level, int):
        level = getattr(logging, DEFAULT_LEVEL)
    return level


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger.

    Logs to stderr with format: [gitcache:{name}] {level}: {message}
    Default level is INFO; override with GITCACHE_LOG_LEVEL env var.

    Args:
        name: Logger name (typically the module name).

    Returns:
        Configured logger instance.
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(f"gitcache.{name}")

    # Only configure if not already configured
    if not logger.handlers:
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(f"[gitcache:{name}] %(levelname)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(resolve_level(os.environ.get(LEVEL_VAR)))

    _loggers[name] = logger
    return logger
