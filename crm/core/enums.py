"""Canonical enums for CRM entities.

Stored data is inconsistent about spellings ("Closed" vs "Closed Won" vs "Won",
"pending" vs "to-do"). Each enum has exactly one canonical spelling; the
legacy aliases below are the only other spellings accepted, and they are
resolved at the entity boundary so the engines only ever see canonical values.
"""

from __future__ import annotations

import enum


class DealStage(str, enum.Enum):
    """Stage of deals in the sales pipeline, in board order."""

    PROSPECTING = "Prospecting"
    QUALIFICATION = "Qualification"
    PROPOSAL = "Proposal"
    NEGOTIATION = "Negotiation"
    CLOSED_WON = "Closed Won"
    CLOSED_LOST = "Closed Lost"


class LeadStatus(str, enum.Enum):
    NEW = "New"
    CONTACTED = "Contacted"
    QUALIFIED = "Qualified"
    UNQUALIFIED = "Unqualified"


class LeadSource(str, enum.Enum):
    WEBSITE = "Website"
    REFERRAL = "Referral"
    SOCIAL_MEDIA = "Social Media"
    COLD_CALL = "Cold Call"
    TRADE_SHOW = "Trade Show"


class LeadPriority(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TaskStatus(str, enum.Enum):
    TO_DO = "to-do"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class ContactType(str, enum.Enum):
    CUSTOMER = "customer"
    LEAD = "lead"


class SalesRep(str, enum.Enum):
    """Fixed roster of sales representatives."""

    JOHN_DOE = "john_doe"
    JANE_SMITH = "jane_smith"
    MIKE_JOHNSON = "mike_johnson"
    SARAH_WILSON = "sarah_wilson"
    DAVID_BROWN = "david_brown"


class ActivityType(str, enum.Enum):
    CONTACT_CREATED = "contact_created"
    CONTACT_UPDATED = "contact_updated"
    DEAL_CREATED = "deal_created"
    DEAL_UPDATED = "deal_updated"
    DEAL_STAGE_CHANGED = "deal_stage_changed"
    TASK_CREATED = "task_created"
    TASK_COMPLETED = "task_completed"
    EMAIL_SENT = "email_sent"
    CALL_MADE = "call_made"
    MEETING_SCHEDULED = "meeting_scheduled"
    NOTE_ADDED = "note_added"

    @property
    def is_deal_related(self) -> bool:
        return self.value.startswith("deal_")

    @property
    def is_contact_related(self) -> bool:
        return self.value.startswith("contact_")


PIPELINE_STAGES: tuple[DealStage, ...] = tuple(DealStage)
CLOSED_STAGES = frozenset({DealStage.CLOSED_WON, DealStage.CLOSED_LOST})

# Legacy spelling -> canonical value. Keys are lower-cased.
LEGACY_DEAL_STAGES: dict[str, DealStage] = {
    "lead": DealStage.PROSPECTING,
    "qualified": DealStage.QUALIFICATION,
    "closed": DealStage.CLOSED_WON,
    "won": DealStage.CLOSED_WON,
    "lost": DealStage.CLOSED_LOST,
}

LEGACY_TASK_STATUSES: dict[str, TaskStatus] = {
    "pending": TaskStatus.TO_DO,
    "to do": TaskStatus.TO_DO,
    "todo": TaskStatus.TO_DO,
    "in progress": TaskStatus.IN_PROGRESS,
    "on hold": TaskStatus.ON_HOLD,
}


def _resolve(enum_cls: type[enum.Enum], legacy: dict, value: object) -> enum.Enum:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{enum_cls.__name__} must be a string, got {type(value).__name__}")

    key = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == key:
            return member
    if key in legacy:
        return legacy[key]
    raise ValueError(f"Unknown {enum_cls.__name__} spelling: {value!r}")


def normalize_deal_stage(value: object) -> DealStage:
    """Resolve a canonical or legacy stage spelling to a DealStage."""
    return _resolve(DealStage, LEGACY_DEAL_STAGES, value)


def normalize_task_status(value: object) -> TaskStatus:
    """Resolve a canonical or legacy task status spelling to a TaskStatus."""
    return _resolve(TaskStatus, LEGACY_TASK_STATUSES, value)


def normalize_activity_type(value: object) -> ActivityType:
    return _resolve(ActivityType, {}, value)


def normalize_contact_type(value: object) -> ContactType:
    return _resolve(ContactType, {}, value)
