"""Contact and company directories: CRUD, search and type filters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from crm.core.enums import ActivityType, ContactType, normalize_contact_type
from crm.core.exceptions import NotFoundError
from crm.schemas.entities import Company, Contact
from crm.services.activity_service import ActivityService
from crm.store.base import EntityType, RecordStore
from crm.utils.validators import coerce_choice

ALL_TYPES = "all"


def _matches(needle: str, *fields: str | None) -> bool:
    return not needle or any(needle in (field or "").lower() for field in fields)


class ContactService:
    def __init__(self, store: RecordStore, activities: ActivityService | None = None) -> None:
        self.store = store
        self.activities = activities or ActivityService(store)

    def get_contact(self, contact_id: Any) -> Contact:
        contact = self.store.get(EntityType.CONTACT, contact_id)
        if contact is None:
            raise NotFoundError("Contact not found")
        return contact

    def create_contact(self, fields: Mapping[str, Any]) -> Contact:
        contact = self.store.create(EntityType.CONTACT, fields)
        self.activities.log(
            ActivityType.CONTACT_CREATED, f"Contact '{contact.name}' created", contact_id=contact.id
        )
        return contact

    def update_contact(self, contact_id: Any, fields: Mapping[str, Any]) -> Contact:
        contact = self.store.update(EntityType.CONTACT, contact_id, fields)
        self.activities.log(
            ActivityType.CONTACT_UPDATED, f"Contact '{contact.name}' updated", contact_id=contact.id
        )
        return contact

    def delete_contact(self, contact_id: Any) -> bool:
        return self.store.delete(EntityType.CONTACT, contact_id)

    def list_contacts(self, search: str = "", contact_type: ContactType | str = ALL_TYPES) -> list[Contact]:
        """Search name/email/company; `contact_type` is "all", "lead" or "customer"."""
        needle = search.strip().lower()
        wanted = None if contact_type == ALL_TYPES else coerce_choice(normalize_contact_type, contact_type)
        return [
            c
            for c in self.store.list(EntityType.CONTACT)
            if _matches(needle, c.name, c.email, c.company) and (wanted is None or c.type is wanted)
        ]


class CompanyService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def get_company(self, company_id: Any) -> Company:
        company = self.store.get(EntityType.COMPANY, company_id)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    def create_company(self, fields: Mapping[str, Any]) -> Company:
        return self.store.create(EntityType.COMPANY, fields)

    def update_company(self, company_id: Any, fields: Mapping[str, Any]) -> Company:
        return self.store.update(EntityType.COMPANY, company_id, fields)

    def delete_company(self, company_id: Any) -> bool:
        return self.store.delete(EntityType.COMPANY, company_id)

    def list_companies(self, search: str = "", company_type: str = ALL_TYPES) -> list[Company]:
        """Search name/email/website and narrow by the free-form company type."""
        needle = search.strip().lower()
        wanted = company_type.strip().lower()
        return [
            c
            for c in self.store.list(EntityType.COMPANY)
            if _matches(needle, c.name, c.email, c.website) and (wanted == ALL_TYPES or c.type.lower() == wanted)
        ]
