"""Shared fixtures for cronsight tests."""

import pytest

from cronsight.infrastructure.config import reset_config
from cronsight.infrastructure.logging import reset_logging

CONFIG_ENV_VARS = (
    "CRONSIGHT_TIMEZONE",
    "CRONSIGHT_SEARCH_HORIZON_DAYS",
    "CRONSIGHT_LOG_LEVEL",
    "CRONSIGHT_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Start every test from default configuration and logging."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()
