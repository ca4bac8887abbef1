from __future__ import annotations

import pytest

from crm.core.enums import ContactType
from crm.core.exceptions import NotFoundError
from crm.services.lead_service import LeadService
from crm.store.base import EntityType


@pytest.fixture
def service(memory_store):
    return LeadService(memory_store)


def _lead(service, **overrides):
    data = {
        "name": "Taylor Brooks",
        "company": "Brooks HVAC",
        "email": "taylor@brooks.example",
        "phone": "555-0111",
        "source": "Trade Show",
        "status": "Contacted",
        "notes": "Met at the expo",
    }
    data.update(overrides)
    return service.create_lead(data)


def test_convert_to_contact_creates_contact_and_removes_lead(service, memory_store):
    lead = _lead(service)
    result = service.convert_to_contact(lead.id)

    assert result.original_lead == lead
    assert result.contact.name == "Taylor Brooks"
    assert result.contact.job_title == "Contact"
    assert result.contact.type is ContactType.LEAD
    assert result.contact.notes == "Converted from lead. Original notes: Met at the expo"
    assert memory_store.get(EntityType.LEAD, lead.id) is None
    assert memory_store.list(EntityType.CONTACT) == [result.contact]


def test_convert_without_notes(service):
    lead = _lead(service, notes="")
    assert service.convert_to_contact(lead.id).contact.notes.endswith("No notes")


def test_conversion_is_one_way(service):
    lead = _lead(service)
    service.convert_to_contact(lead.id)
    with pytest.raises(NotFoundError):
        service.convert_to_contact(lead.id)


def test_list_by_status_and_source_are_case_insensitive(service):
    _lead(service)
    _lead(service, email="x@y.example", status="New", source="Website")

    assert len(service.list_by_status("contacted")) == 1
    assert len(service.list_by_source("WEBSITE")) == 1


def test_filter_leads_combines_search_and_filters(service):
    _lead(service)
    _lead(service, name="Morgan Lee", company="Lee Builders", email="morgan@lee.example", status="Qualified")

    assert [l.name for l in service.filter_leads(search="builders")] == ["Morgan Lee"]
    assert service.filter_leads(search="builders", status="New") == []
    assert len(service.filter_leads(source="Trade Show")) == 2
