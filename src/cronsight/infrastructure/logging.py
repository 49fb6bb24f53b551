"""Logging setup for cronsight.

Modules log through the standard library (``logging.getLogger(__name__)``).
This module only decides where the ``cronsight`` logger hierarchy writes
and in which format.

Usage:
    >>> from cronsight.infrastructure.logging import configure_logging
    >>>
    >>> configure_logging(level="debug", format="json")
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, TextIO

ROOT_LOGGER = "cronsight"
CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


# =============================================================================
# Log Levels
# =============================================================================


class LogLevel(IntEnum):
    """Log severity levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_string(cls, level: str) -> "LogLevel":
        """Convert string to LogLevel, defaulting to INFO."""
        mapping = {
            "debug": cls.DEBUG,
            "info": cls.INFO,
            "warning": cls.WARNING,
            "warn": cls.WARNING,
            "error": cls.ERROR,
            "critical": cls.CRITICAL,
            "fatal": cls.CRITICAL,
        }
        return mapping.get(level.lower(), cls.INFO)


# =============================================================================
# Formatters
# =============================================================================


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# =============================================================================
# Log Configuration
# =============================================================================


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str | LogLevel = LogLevel.WARNING
    format: str = "console"  # console, json

    @property
    def resolved_level(self) -> LogLevel:
        if isinstance(self.level, LogLevel):
            return self.level
        return LogLevel.from_string(self.level)

    def create_formatter(self) -> logging.Formatter:
        if self.format == "json":
            return JsonFormatter()
        return logging.Formatter(CONSOLE_FORMAT)


# =============================================================================
# Global Setup
# =============================================================================


_handler: logging.Handler | None = None
_lock = threading.Lock()


def configure_logging(
    *,
    level: str | LogLevel = LogLevel.WARNING,
    format: str = "console",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single handler to the ``cronsight`` logger.

    Calling this again replaces the previous handler.

    Args:
        level: Log level.
        format: Output format (console, json).
        stream: Where to write (default: stderr).

    Returns:
        The configured ``cronsight`` logger.
    """
    global _handler

    config = LogConfig(level=level, format=format)

    with _lock:
        root = logging.getLogger(ROOT_LOGGER)
        if _handler is not None:
            root.removeHandler(_handler)

        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(config.create_formatter())
        root.addHandler(_handler)
        root.setLevel(config.resolved_level)
        return root


def reset_logging() -> None:
    """Remove the handler installed by configure_logging."""
    global _handler

    with _lock:
        root = logging.getLogger(ROOT_LOGGER)
        if _handler is not None:
            root.removeHandler(_handler)
            _handler = None
        root.setLevel(logging.NOTSET)
