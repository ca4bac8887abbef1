"""Record store contract shared by the in-memory and SQL adapters."""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from crm.core.exceptions import ValidationError
from crm.schemas.entities import Activity, Company, Contact, Deal, Entity, Lead, Task, as_utc

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_STORAGE_SUFFIX = "_c"


class EntityType(str, enum.Enum):
    CONTACT = "contact"
    COMPANY = "company"
    LEAD = "lead"
    DEAL = "deal"
    TASK = "task"
    ACTIVITY = "activity"

    @property
    def model(self) -> type[Entity]:
        return ENTITY_MODELS[self]


ENTITY_MODELS: dict[EntityType, type[Entity]] = {
    EntityType.CONTACT: Contact,
    EntityType.COMPANY: Company,
    EntityType.LEAD: Lead,
    EntityType.DEAL: Deal,
    EntityType.TASK: Task,
    EntityType.ACTIVITY: Activity,
}

# Fields the store owns. Only a forward-moving deal updated_at is taken from callers.
_MANAGED_FIELDS = {"id", "created_at", "updated_at", "timestamp"}


def normalize_field_name(name: str) -> str:
    """Map storage column names (`contactId`, `due_date_c`, `Id`) to entity field names."""
    if name.endswith(_STORAGE_SUFFIX) and len(name) > len(_STORAGE_SUFFIX):
        name = name[: -len(_STORAGE_SUFFIX)]
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def normalize_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {normalize_field_name(key): value for key, value in raw.items()}


def parse_id(entity_type: EntityType, record_id: Any) -> int:
    """Coerce an identifier the way the record API accepts it ("12" or 12)."""
    if isinstance(record_id, bool):
        raise ValidationError(f"Invalid {entity_type.value} ID: {record_id!r}")
    try:
        value = int(record_id)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {entity_type.value} ID: {record_id!r}") from exc
    if value < 1:
        raise ValidationError(f"Invalid {entity_type.value} ID: {record_id!r}")
    return value


def _validate(entity_type: EntityType, payload: dict[str, Any]) -> Entity:
    try:
        return entity_type.model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid {entity_type.value} fields: {exc.errors(include_url=False)}"
        ) from exc


def build_created(entity_type: EntityType, fields: Mapping[str, Any], new_id: int, now: datetime) -> Entity:
    """Validate `fields` into a new record with store-managed id and timestamps."""
    payload = {k: v for k, v in normalize_fields(fields).items() if k not in _MANAGED_FIELDS}
    payload["id"] = new_id
    if entity_type is EntityType.ACTIVITY:
        payload["timestamp"] = now
    else:
        payload["created_at"] = now
    if entity_type is EntityType.DEAL:
        payload["updated_at"] = now
    return _validate(entity_type, payload)


def build_updated(entity_type: EntityType, existing: Entity, fields: Mapping[str, Any], now: datetime) -> Entity:
    """Merge `fields` over `existing`; deals get a strictly later updated_at.

    A deal update may carry its own ``updated_at`` (a stage move computed by the
    pipeline engine); it wins over the store clock as long as it moves forward.
    """
    if entity_type is EntityType.ACTIVITY:
        raise ValidationError("Activities are append-only and cannot be updated.")
    updates = normalize_fields(fields)
    payload = existing.model_dump()
    if "due_date" in updates:
        payload.pop("due_at", None)
    payload.update({k: v for k, v in updates.items() if k not in _MANAGED_FIELDS})
    if entity_type is EntityType.DEAL:
        requested = updates.get("updated_at")
        stamp = as_utc(requested) if isinstance(requested, datetime) else now
        payload["updated_at"] = max(stamp, existing.updated_at + timedelta(microseconds=1))
    return _validate(entity_type, payload)


class RecordStore(ABC):
    """Uniform CRUD contract per entity type."""

    @abstractmethod
    def list(self, entity_type: EntityType) -> list[Entity]:
        ...

    @abstractmethod
    def get(self, entity_type: EntityType, record_id: Any) -> Entity | None:
        ...

    @abstractmethod
    def create(self, entity_type: EntityType, fields: Mapping[str, Any]) -> Entity:
        ...

    @abstractmethod
    def update(self, entity_type: EntityType, record_id: Any, fields: Mapping[str, Any]) -> Entity:
        ...

    @abstractmethod
    def delete(self, entity_type: EntityType, record_id: Any) -> bool:
        ...
