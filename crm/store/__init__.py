"""Record store contract and adapters."""

from crm.store.base import EntityType, RecordStore, normalize_fields
from crm.store.memory import InMemoryRecordStore

__all__ = ["EntityType", "InMemoryRecordStore", "RecordStore", "normalize_fields"]
