"""
Shared pytest fixtures: settings and logging state are reset around every
test so environment overrides never leak between tests.
"""
import logging

import pytest

from prse.config import get_settings
from prse.logging import LoggerRegistry


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Clear cached settings; tests opt into overrides via monkeypatch.setenv."""
    monkeypatch.setenv("PRSE_REPORT_COLORS", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_logging():
    prse_logger = logging.getLogger("prse")
    handlers, level, propagate = prse_logger.handlers[:], prse_logger.level, prse_logger.propagate
    yield
    prse_logger.handlers = handlers
    prse_logger.setLevel(level)
    prse_logger.propagate = propagate
    LoggerRegistry._loggers.clear()


@pytest.fixture
def settings_env(monkeypatch):
    """Set PRSE_* environment variables and refresh settings."""
    def apply(**values):
        for key, value in values.items():
            monkeypatch.setenv(f"PRSE_{key}", str(value))
        get_settings.cache_clear()
        return get_settings()
    return apply
