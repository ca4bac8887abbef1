"""In-memory record store.

Each store owns its records and an identifier sequence per entity type, so two
stores (or two tests) never share state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from crm.core.exceptions import NotFoundError, ValidationError
from crm.schemas.entities import Entity, utcnow
from crm.store.base import (
    EntityType,
    RecordStore,
    build_created,
    build_updated,
    normalize_fields,
    parse_id,
)
from crm.utils.ids import IdSequence, SequenceFactory
from crm.utils.validators import coerce_records

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    def __init__(
        self,
        sequence_factory: SequenceFactory = IdSequence,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._clock = clock
        self._records: dict[EntityType, dict[int, Entity]] = {t: {} for t in EntityType}
        self._sequences: dict[EntityType, IdSequence] = {t: sequence_factory() for t in EntityType}

    def seed(self, entity_type: EntityType, records: Iterable[Mapping[str, Any] | Entity]) -> list[Entity]:
        """Load existing records verbatim (ids and timestamps included).

        Ids must be new to the store; a collision rejects the whole batch.
        """
        prepared = [r if isinstance(r, Entity) else normalize_fields(r) for r in records]
        entities = coerce_records(entity_type.model, prepared)
        bucket = self._records[entity_type]
        seen: set[int] = set()
        for entity in entities:
            if entity.id in bucket or entity.id in seen:
                raise ValidationError(f"Duplicate {entity_type.value} ID: {entity.id}")
            seen.add(entity.id)
        for entity in entities:
            bucket[entity.id] = entity
        self._sequences[entity_type].observe(bucket.keys())
        return entities

    def list(self, entity_type: EntityType) -> list[Entity]:
        return list(self._records[entity_type].values())

    def get(self, entity_type: EntityType, record_id: Any) -> Entity | None:
        return self._records[entity_type].get(parse_id(entity_type, record_id))

    def _require(self, entity_type: EntityType, record_id: Any) -> Entity:
        record = self.get(entity_type, record_id)
        if record is None:
            raise NotFoundError(f"{entity_type.value.capitalize()} not found: {record_id}")
        return record

    def create(self, entity_type: EntityType, fields: Mapping[str, Any]) -> Entity:
        record = build_created(entity_type, fields, self._sequences[entity_type](), self._clock())
        self._records[entity_type][record.id] = record
        logger.info(
            "store.record.created",
            extra={"event": "store.record.created", "entity_type": entity_type.value, "entity_id": record.id},
        )
        return record

    def update(self, entity_type: EntityType, record_id: Any, fields: Mapping[str, Any]) -> Entity:
        existing = self._require(entity_type, record_id)
        record = build_updated(entity_type, existing, fields, self._clock())
        self._records[entity_type][record.id] = record
        return record

    def delete(self, entity_type: EntityType, record_id: Any) -> bool:
        existing = self._require(entity_type, record_id)
        del self._records[entity_type][existing.id]
        logger.info(
            "store.record.deleted",
            extra={"event": "store.record.deleted", "entity_type": entity_type.value, "entity_id": existing.id},
        )
        return True
