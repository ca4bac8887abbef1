from __future__ import annotations

import pytest

from crm.core.config import get_config
from crm.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    for key in ("ENV", "STORE_BACKEND", "DEFAULT_DATE_RANGE", "REVENUE_TREND_MONTHS", "DATABASE_URL", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_defaults_are_valid():
    config = get_config()
    assert config.STORE_BACKEND == "memory"
    assert config.DEFAULT_DATE_RANGE == "thisMonth"
    assert config.REVENUE_TREND_MONTHS == 6
    assert config.RECENT_ACTIVITY_LIMIT == 8


def test_unknown_store_backend_rejected(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "redis")
    with pytest.raises(ConfigurationError, match="STORE_BACKEND"):
        get_config()


def test_production_requires_sql_backend(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    with pytest.raises(ConfigurationError, match="Production requires"):
        get_config()


def test_non_integer_trend_months_rejected(monkeypatch):
    monkeypatch.setenv("REVENUE_TREND_MONTHS", "six")
    with pytest.raises(ConfigurationError, match="REVENUE_TREND_MONTHS"):
        get_config()


def test_unknown_default_date_range_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_DATE_RANGE", "decade")
    with pytest.raises(ConfigurationError, match="DEFAULT_DATE_RANGE"):
        get_config()
