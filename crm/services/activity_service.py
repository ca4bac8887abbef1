"""Append-only activity log."""

from __future__ import annotations

from datetime import datetime

from crm.core.enums import ActivityType, normalize_activity_type
from crm.engines.analytics import activity_summary, recent_activities
from crm.schemas.analytics import ActivitySummary
from crm.schemas.entities import Activity
from crm.store.base import EntityType, RecordStore
from crm.utils.validators import coerce_choice


class ActivityService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def log(
        self,
        activity_type: ActivityType | str,
        description: str,
        contact_id: int | None = None,
        deal_id: int | None = None,
    ) -> Activity:
        return self.store.create(
            EntityType.ACTIVITY,
            {
                "type": coerce_choice(normalize_activity_type, activity_type),
                "description": description,
                "contact_id": contact_id,
                "deal_id": deal_id,
            },
        )

    def for_contact(self, contact_id: int) -> list[Activity]:
        return [a for a in self.store.list(EntityType.ACTIVITY) if a.contact_id == contact_id]

    def recent(self, limit: int = 8) -> list[Activity]:
        return recent_activities(self.store.list(EntityType.ACTIVITY), limit=limit)

    def search(self, query: str = "", activity_type: ActivityType | str | None = None) -> list[Activity]:
        """Case-insensitive description search, newest first."""
        needle = query.strip().lower()
        wanted = coerce_choice(normalize_activity_type, activity_type) if activity_type else None
        matches = [
            a
            for a in self.store.list(EntityType.ACTIVITY)
            if needle in a.description.lower() and (wanted is None or a.type is wanted)
        ]
        return sorted(matches, key=lambda a: a.timestamp, reverse=True)

    def summary(self, now: datetime | None = None) -> ActivitySummary:
        return activity_summary(self.store.list(EntityType.ACTIVITY), now)

    def delete(self, activity_id: int) -> bool:
        return self.store.delete(EntityType.ACTIVITY, activity_id)
