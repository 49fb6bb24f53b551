"""Configuration and logging infrastructure for cronsight."""

from cronsight.infrastructure.config import (
    ConfigError,
    CronsightConfig,
    get_config,
    reset_config,
    set_config,
)
from cronsight.infrastructure.logging import (
    JsonFormatter,
    LogConfig,
    LogLevel,
    configure_logging,
    reset_logging,
)

__all__ = [
    # Config
    "ConfigError",
    "CronsightConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Logging
    "JsonFormatter",
    "LogConfig",
    "LogLevel",
    "configure_logging",
    "reset_logging",
]
