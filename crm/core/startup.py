"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from crm.core.config import get_config
from crm.core.logging_config import configure_logging
from crm.database.db import verify_database_connection
from crm.store.base import RecordStore
from crm.store.factory import get_record_store

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    if config.STORE_BACKEND != "sql":
        return

    if not verify_database_connection():
        raise RuntimeError("Database connectivity check failed.")
    if config.is_production and config.DATABASE_URL.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )


def bootstrap() -> RecordStore:
    """Initialize logging, validate configuration and return the configured record store."""
    configure_logging()
    validate_startup_config()
    config = get_config()
    logger.info(
        "startup.config.validated",
        extra={"event": "startup.config.validated"},
    )
    logger.info("startup.store.backend: %s (env=%s)", config.STORE_BACKEND, config.ENV)
    return get_record_store(config)
