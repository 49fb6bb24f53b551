"""Configuration for cronsight.

Settings come from ``CRONSIGHT_*`` environment variables and fall back to
built-in defaults:

    CRONSIGHT_TIMEZONE              IANA zone for display (default: system local)
    CRONSIGHT_SEARCH_HORIZON_DAYS   How far ahead to search (default: 1464)
    CRONSIGHT_LOG_LEVEL             Log level (default: WARNING)
    CRONSIGHT_LOG_FORMAT            console or json (default: console)

Usage:
    >>> from cronsight.infrastructure.config import get_config
    >>>
    >>> config = get_config()
    >>> config.search_horizon
    datetime.timedelta(days=1464)
"""

from __future__ import annotations

import dataclasses
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from cronsight.scheduling.cron import DEFAULT_HORIZON

ENV_PREFIX = "CRONSIGHT"
DEFAULT_SEARCH_HORIZON_DAYS = DEFAULT_HORIZON.days
LOG_FORMATS = ("console", "json")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(Exception):
    """Base configuration error."""

    pass


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class CronsightConfig:
    """Process-wide settings.

    Attributes:
        timezone: IANA zone used for evaluation and display; None means
            the system local zone.
        search_horizon_days: Days past the reference instant to search
            before giving up.
        log_level: Level name for the ``cronsight`` loggers.
        log_format: ``console`` or ``json``.
    """

    timezone: str | None = None
    search_horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS
    log_level: str = "WARNING"
    log_format: str = "console"

    def __post_init__(self) -> None:
        if self.search_horizon_days <= 0:
            raise ConfigError(
                f"search_horizon_days must be positive, got {self.search_horizon_days}"
            )
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(
                f"log_format must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}"
            )

    @property
    def search_horizon(self) -> timedelta:
        return timedelta(days=self.search_horizon_days)

    def with_overrides(self, **changes: object) -> "CronsightConfig":
        """Return a copy with some fields replaced."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "CronsightConfig":
        """Load configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ

        return cls(
            timezone=env.get(f"{ENV_PREFIX}_TIMEZONE") or None,
            search_horizon_days=_get_int(
                env, f"{ENV_PREFIX}_SEARCH_HORIZON_DAYS", DEFAULT_SEARCH_HORIZON_DAYS
            ),
            log_level=env.get(f"{ENV_PREFIX}_LOG_LEVEL", "WARNING"),
            log_format=env.get(f"{ENV_PREFIX}_LOG_FORMAT", "console").lower(),
        )


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from None


# =============================================================================
# Global Configuration
# =============================================================================


_config: CronsightConfig | None = None
_lock = threading.Lock()


def get_config() -> CronsightConfig:
    """Get the global configuration, loading it from the environment once."""
    global _config

    with _lock:
        if _config is None:
            _config = CronsightConfig.from_environment()
        return _config


def set_config(config: CronsightConfig) -> None:
    """Replace the global configuration."""
    global _config

    with _lock:
        _config = config


def reset_config() -> None:
    """Forget the global configuration so the next access reloads it."""
    global _config

    with _lock:
        _config = None
