"""Configuration module for the CRM core."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from crm.core.exceptions import ConfigurationError

load_dotenv()

DATE_RANGE_KEYS = {"thisMonth", "lastMonth", "quarter", "year"}
STORE_BACKENDS = {"memory", "sql"}


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    STORE_BACKEND: str
    LOG_LEVEL: str
    LOG_FILE: str
    DEFAULT_DATE_RANGE: str
    REVENUE_TREND_MONTHS: int
    RECENT_ACTIVITY_LIMIT: int
    SESSION_ACTIVE: bool

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))

    config = Config(
        APP_NAME="CRM",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./crm.db"),
        STORE_BACKEND=os.getenv("STORE_BACKEND", "memory").strip().lower(),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        DEFAULT_DATE_RANGE=os.getenv("DEFAULT_DATE_RANGE", "thisMonth").strip(),
        REVENUE_TREND_MONTHS=_as_int("REVENUE_TREND_MONTHS", "6"),
        RECENT_ACTIVITY_LIMIT=_as_int("RECENT_ACTIVITY_LIMIT", "8"),
        SESSION_ACTIVE=_as_bool(os.getenv("SESSION_ACTIVE"), default=True),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.STORE_BACKEND not in STORE_BACKENDS:
        raise ConfigurationError("STORE_BACKEND must be one of memory/sql.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.DEFAULT_DATE_RANGE not in DATE_RANGE_KEYS:
        raise ConfigurationError("DEFAULT_DATE_RANGE must be one of thisMonth/lastMonth/quarter/year.")
    if config.REVENUE_TREND_MONTHS < 1:
        raise ConfigurationError("REVENUE_TREND_MONTHS must be >= 1.")
    if config.RECENT_ACTIVITY_LIMIT < 1:
        raise ConfigurationError("RECENT_ACTIVITY_LIMIT must be >= 1.")
    if config.is_production and config.STORE_BACKEND == "memory":
        raise ConfigurationError("Production requires STORE_BACKEND=sql.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
