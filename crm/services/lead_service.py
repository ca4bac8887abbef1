"""Lead service: CRUD, filtering and one-way conversion to contacts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from crm.core.enums import ActivityType, ContactType
from crm.core.exceptions import NotFoundError
from crm.schemas.entities import Contact, Lead
from crm.services.activity_service import ActivityService
from crm.store.base import EntityType, RecordStore
from crm.utils.validators import sanitize_text

logger = logging.getLogger(__name__)

CONVERTED_JOB_TITLE = "Contact"


@dataclass(frozen=True)
class ConversionResult:
    contact: Contact
    original_lead: Lead


class LeadService:
    """Service for lead CRUD and conversion.

    Conversion is terminal: the lead is deleted once its contact exists. There
    is no stored "Converted" status.
    """

    def __init__(self, store: RecordStore, activities: ActivityService | None = None) -> None:
        self.store = store
        self.activities = activities or ActivityService(store)

    def create_lead(self, data: Mapping[str, Any]) -> Lead:
        return self.store.create(EntityType.LEAD, data)

    def get_lead(self, lead_id: Any) -> Lead:
        lead = self.store.get(EntityType.LEAD, lead_id)
        if lead is None:
            raise NotFoundError("Lead not found")
        return lead

    def update_lead(self, lead_id: Any, updates: Mapping[str, Any]) -> Lead:
        return self.store.update(EntityType.LEAD, lead_id, updates)

    def delete_lead(self, lead_id: Any) -> bool:
        return self.store.delete(EntityType.LEAD, lead_id)

    def list_by_status(self, status: str) -> list[Lead]:
        wanted = status.strip().lower()
        return [lead for lead in self.store.list(EntityType.LEAD) if lead.status.value.lower() == wanted]

    def list_by_source(self, source: str) -> list[Lead]:
        wanted = source.strip().lower()
        return [lead for lead in self.store.list(EntityType.LEAD) if lead.source.value.lower() == wanted]

    def filter_leads(self, search: str = "", status: str | None = None, source: str | None = None) -> list[Lead]:
        """Search name/company/email, then narrow by exact status and source."""
        needle = search.strip().lower()
        results = []
        for lead in self.store.list(EntityType.LEAD):
            haystack = f"{lead.name} {lead.company} {lead.email}".lower()
            if needle and needle not in haystack:
                continue
            if status and lead.status.value != status:
                continue
            if source and lead.source.value != source:
                continue
            results.append(lead)
        return results

    def convert_to_contact(self, lead_id: Any) -> ConversionResult:
        lead = self.get_lead(lead_id)
        contact = self.store.create(
            EntityType.CONTACT,
            {
                "name": lead.name,
                "email": lead.email,
                "phone": lead.phone,
                "company": lead.company,
                "job_title": CONVERTED_JOB_TITLE,
                "type": ContactType.LEAD,
                "notes": f"Converted from lead. Original notes: {sanitize_text(lead.notes) or 'No notes'}",
            },
        )
        self.store.delete(EntityType.LEAD, lead.id)
        self.activities.log(
            ActivityType.CONTACT_CREATED,
            f"Lead '{lead.name}' converted to contact",
            contact_id=contact.id,
        )
        logger.info(
            "lead.converted",
            extra={"event": "lead.converted", "lead_id": lead.id, "entity_id": contact.id},
        )
        return ConversionResult(contact=contact, original_lead=lead)
