from __future__ import annotations

import pytest

from crm.core.enums import ActivityType, ContactType
from crm.core.exceptions import NotFoundError, ValidationError
from crm.services.contact_service import CompanyService, ContactService
from crm.store.base import EntityType


@pytest.fixture
def contacts(memory_store):
    service = ContactService(memory_store)
    service.create_contact({"name": "Dana Smith", "email": "dana@acme.example", "company": "Acme", "type": "customer"})
    service.create_contact({"name": "Lee Park", "email": "lee@globex.example", "company": "Globex"})
    return service


def test_create_contact_logs_activity(contacts, memory_store):
    activities = memory_store.list(EntityType.ACTIVITY)
    assert [a.type for a in activities] == [ActivityType.CONTACT_CREATED] * 2
    assert activities[0].contact_id == 1


def test_list_contacts_searches_name_email_and_company(contacts):
    assert [c.name for c in contacts.list_contacts("globex")] == ["Lee Park"]
    assert [c.name for c in contacts.list_contacts("DANA@")] == ["Dana Smith"]
    assert len(contacts.list_contacts()) == 2


def test_list_contacts_filters_by_type(contacts):
    assert [c.name for c in contacts.list_contacts(contact_type="customer")] == ["Dana Smith"]
    assert [c.name for c in contacts.list_contacts(contact_type=ContactType.LEAD)] == ["Lee Park"]
    assert contacts.list_contacts("acme", contact_type="lead") == []
    with pytest.raises(ValidationError):
        contacts.list_contacts(contact_type="vendor")


def test_update_and_missing_contact(contacts, memory_store):
    updated = contacts.update_contact(2, {"type": "customer"})
    assert updated.type is ContactType.CUSTOMER
    assert memory_store.list(EntityType.ACTIVITY)[-1].type is ActivityType.CONTACT_UPDATED
    with pytest.raises(NotFoundError):
        contacts.get_contact(99)


def test_list_companies_searches_and_filters(memory_store):
    service = CompanyService(memory_store)
    service.create_company({"name": "Acme", "email": "hi@acme.example", "website": "acme.example", "type": "Customer"})
    service.create_company({"name": "Globex", "website": "globex.example", "type": "Prospect"})

    assert [c.name for c in service.list_companies("globex.example")] == ["Globex"]
    assert [c.name for c in service.list_companies(company_type="customer")] == ["Acme"]
    assert len(service.list_companies()) == 2
