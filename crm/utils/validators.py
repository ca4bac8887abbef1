"""Deterministic validators used at the engine boundary."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from crm.core.exceptions import ValidationError
from crm.schemas.entities import as_utc

ModelT = TypeVar("ModelT", bound=BaseModel)
EnumT = TypeVar("EnumT")


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    return cleaned[:max_len]


def coerce_records(model: type[ModelT], records: Iterable[Any]) -> list[ModelT]:
    """Validate a snapshot into entity models, failing fast on the first bad record."""
    if records is None:
        raise ValidationError(f"{model.__name__} snapshot must be a collection, got None")

    coerced: list[ModelT] = []
    for index, record in enumerate(records):
        if isinstance(record, model):
            coerced.append(record)
            continue
        try:
            if isinstance(record, Mapping):
                coerced.append(model.model_validate(dict(record)))
            else:
                coerced.append(model.model_validate(record, from_attributes=True))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid {model.__name__} record at index {index}: {exc.errors(include_url=False)}"
            ) from exc
    return coerced


def coerce_amount(value: Any, label: str = "amount") -> Decimal:
    """Return a finite Decimal or raise; bools and NaN are rejected."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{label} must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValidationError(f"{label} must be numeric, got {value!r}") from exc
    else:
        raise ValidationError(f"{label} must be numeric, got {type(value).__name__}")

    if not amount.is_finite():
        raise ValidationError(f"{label} must be finite, got {value!r}")
    return amount


def coerce_moment(value: Any, label: str = "now") -> datetime:
    """Return a timezone-aware datetime for a reference instant."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        raise ValidationError(f"{label} must be a datetime, not a bare date")
    if isinstance(value, str):
        try:
            return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError as exc:
            raise ValidationError(f"{label} is not an ISO-8601 timestamp: {value!r}") from exc
    raise ValidationError(f"{label} must be a datetime, got {type(value).__name__}")


def coerce_choice(normalize: Callable[[Any], EnumT], value: Any) -> EnumT:
    """Run an enum normalizer, reporting unknown spellings as ValidationError."""
    try:
        return normalize(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
