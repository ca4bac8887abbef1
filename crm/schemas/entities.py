"""Entity types for CRM records.

Records are immutable snapshots. They accept clean snake_case field names as
well as the camelCase names used at the record-store boundary, and can be
built straight from ORM rows.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from crm.core.enums import (
    ActivityType,
    ContactType,
    DealStage,
    LeadPriority,
    LeadSource,
    LeadStatus,
    SalesRep,
    TaskStatus,
    normalize_deal_stage,
    normalize_task_status,
)

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def _as_instant(value: Any) -> datetime | None:
    """The datetime carried by a timestamp-shaped value, else None."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str) and "T" in value:
        try:
            return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def _as_date(value: Any) -> Any:
    instant = _as_instant(value)
    return instant.date() if instant is not None else value


class Entity(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    id: int = Field(ge=1)


class Contact(Entity):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(default="", max_length=320)
    phone: str = ""
    company: str = ""
    job_title: str = ""
    address: str = ""
    notes: str = ""
    type: ContactType = ContactType.LEAD
    created_at: UtcDatetime
    last_activity: UtcDatetime | None = None


class Company(Entity):
    name: str = Field(min_length=1, max_length=255)
    email: str = ""
    phone: str = ""
    website: str = ""
    address: str = ""
    type: str = ""
    created_at: UtcDatetime


class Lead(Entity):
    name: str = Field(min_length=1, max_length=255)
    company: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    phone: str = Field(min_length=1, max_length=64)
    source: LeadSource = LeadSource.WEBSITE
    status: LeadStatus = LeadStatus.NEW
    priority: LeadPriority = LeadPriority.MEDIUM
    assigned_to: str | None = None
    notes: str = ""
    created_at: UtcDatetime

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if not _EMAIL_RE.fullmatch(value):
            raise ValueError("email must look like name@domain.tld")
        return value


class Deal(Entity):
    title: str = Field(min_length=1, max_length=255)
    value: Decimal = Field(ge=0, allow_inf_nan=False)
    stage: DealStage = DealStage.PROSPECTING
    contact_id: int = Field(ge=1)
    expected_close_date: date | None = None
    probability: int = Field(default=0, ge=0, le=100)
    sales_rep: SalesRep | None = None
    description: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @field_validator("stage", mode="before")
    @classmethod
    def _canonical_stage(cls, value: Any) -> DealStage:
        return normalize_deal_stage(value)

    @field_validator("expected_close_date", mode="before")
    @classmethod
    def _close_date(cls, value: Any) -> Any:
        return _as_date(value)

    @field_validator("sales_rep", mode="before")
    @classmethod
    def _blank_sales_rep(cls, value: Any) -> Any:
        return value or None

    @model_validator(mode="after")
    def _updated_after_created(self) -> "Deal":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not precede created_at")
        return self


class Task(Entity):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    due_date: date
    due_at: UtcDatetime | None = None
    status: TaskStatus = TaskStatus.TO_DO
    contact_id: int | None = Field(default=None, ge=1)
    created_at: UtcDatetime

    @model_validator(mode="before")
    @classmethod
    def _keep_due_instant(cls, data: Any) -> Any:
        # Timestamp due dates keep their instant; see due_day().
        if not isinstance(data, Mapping) or data.get("due_at") or data.get("dueAt"):
            return data
        instant = _as_instant(data.get("due_date", data.get("dueDate")))
        if instant is None:
            return data
        return {**data, "due_at": instant}

    @field_validator("status", mode="before")
    @classmethod
    def _canonical_status(cls, value: Any) -> TaskStatus:
        return normalize_task_status(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, value: Any) -> Any:
        return _as_date(value)

    @field_validator("contact_id", mode="before")
    @classmethod
    def _blank_contact(cls, value: Any) -> Any:
        return value or None

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def due_day(self, reference: datetime) -> date:
        """Calendar due date as seen from the timezone of `reference`."""
        if self.due_at is None:
            return self.due_date
        return self.due_at.astimezone(reference.tzinfo).date()


class Activity(Entity):
    type: ActivityType
    description: str = ""
    contact_id: int | None = Field(default=None, ge=1)
    deal_id: int | None = Field(default=None, ge=1)
    timestamp: UtcDatetime
