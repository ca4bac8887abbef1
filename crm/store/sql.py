"""SQLAlchemy-backed record store."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from crm.core.exceptions import NotFoundError
from crm.database import models
from crm.schemas.entities import Entity, utcnow
from crm.services.base_service import BaseService
from crm.store.base import EntityType, RecordStore, build_created, build_updated, parse_id

logger = logging.getLogger(__name__)

ROW_MODELS = {
    EntityType.CONTACT: models.Contact,
    EntityType.COMPANY: models.Company,
    EntityType.LEAD: models.Lead,
    EntityType.DEAL: models.Deal,
    EntityType.TASK: models.Task,
    EntityType.ACTIVITY: models.Activity,
}


def _row_to_entity(entity_type: EntityType, row: Any) -> Entity:
    payload = {column.key: getattr(row, column.key) for column in row.__table__.columns}
    return entity_type.model.model_validate(payload)


def _entity_to_columns(entity: Entity) -> dict[str, Any]:
    columns = {}
    for key, value in entity.model_dump(mode="python").items():
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = value.astimezone(timezone.utc)
        columns[key] = value
    return columns


class SqlRecordStore(BaseService, RecordStore):
    """Record store over the ORM tables; each mutating call commits on its own."""

    def __init__(self, db_session: Session | None = None, clock: Callable[[], datetime] = utcnow) -> None:
        super().__init__(db_session)
        self._clock = clock

    def _row(self, entity_type: EntityType, record_id: Any):
        row_model = ROW_MODELS[entity_type]
        return self.db.query(row_model).filter(row_model.id == parse_id(entity_type, record_id)).first()

    def _next_id(self, entity_type: EntityType) -> int:
        row_model = ROW_MODELS[entity_type]
        latest = self.db.query(row_model.id).order_by(row_model.id.desc()).first()
        return (latest[0] if latest else 0) + 1

    def list(self, entity_type: EntityType) -> list[Entity]:
        row_model = ROW_MODELS[entity_type]
        rows = self.db.query(row_model).order_by(row_model.id).all()
        return [_row_to_entity(entity_type, row) for row in rows]

    def get(self, entity_type: EntityType, record_id: Any) -> Entity | None:
        row = self._row(entity_type, record_id)
        return _row_to_entity(entity_type, row) if row is not None else None

    def create(self, entity_type: EntityType, fields: Mapping[str, Any]) -> Entity:
        record = build_created(entity_type, fields, self._next_id(entity_type), self._clock())
        self.db.add(ROW_MODELS[entity_type](**_entity_to_columns(record)))
        self.commit()
        logger.info(
            "store.record.created",
            extra={"event": "store.record.created", "entity_type": entity_type.value, "entity_id": record.id},
        )
        return record

    def update(self, entity_type: EntityType, record_id: Any, fields: Mapping[str, Any]) -> Entity:
        row = self._row(entity_type, record_id)
        if row is None:
            raise NotFoundError(f"{entity_type.value.capitalize()} not found: {record_id}")

        record = build_updated(entity_type, _row_to_entity(entity_type, row), fields, self._clock())
        for column, value in _entity_to_columns(record).items():
            setattr(row, column, value)
        self.commit()
        return record

    def delete(self, entity_type: EntityType, record_id: Any) -> bool:
        row = self._row(entity_type, record_id)
        if row is None:
            raise NotFoundError(f"{entity_type.value.capitalize()} not found: {record_id}")

        record_key = row.id
        self.db.delete(row)
        self.commit()
        logger.info(
            "store.record.deleted",
            extra={"event": "store.record.deleted", "entity_type": entity_type.value, "entity_id": record_key},
        )
        return True
