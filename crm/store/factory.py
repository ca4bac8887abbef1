"""Record store selection from configuration."""

from __future__ import annotations

from crm.core.config import Config, get_config
from crm.store.base import RecordStore
from crm.store.memory import InMemoryRecordStore


def get_record_store(config: Config | None = None) -> RecordStore:
    config = config or get_config()
    if config.STORE_BACKEND == "sql":
        from crm.database.db import init_db
        from crm.store.sql import SqlRecordStore

        init_db()
        return SqlRecordStore()
    return InMemoryRecordStore()
