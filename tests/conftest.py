from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from crm.database.db import Base
import crm.database.models  # noqa: F401
from crm.schemas.entities import Activity, Deal, Task
from crm.store.memory import InMemoryRecordStore

NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_deal():
    ids = itertools.count(1)

    def _make(stage="Prospecting", value=1000, created_at=NOW - timedelta(days=1), **overrides) -> Deal:
        fields = {
            "id": next(ids),
            "title": "Website redesign",
            "value": Decimal(str(value)),
            "stage": stage,
            "contact_id": 1,
            "created_at": created_at,
            "updated_at": created_at,
        }
        fields.update(overrides)
        return Deal(**fields)

    return _make


@pytest.fixture
def make_task():
    ids = itertools.count(1)

    def _make(due_date: date, status="to-do", **overrides) -> Task:
        fields = {
            "id": next(ids),
            "title": "Follow up call",
            "due_date": due_date,
            "status": status,
            "created_at": NOW - timedelta(days=10),
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def make_activity():
    ids = itertools.count(1)

    def _make(activity_type="note_added", timestamp=NOW, **overrides) -> Activity:
        fields = {"id": next(ids), "type": activity_type, "description": "Note", "timestamp": timestamp}
        fields.update(overrides)
        return Activity(**fields)

    return _make


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    ticks = itertools.count()
    return InMemoryRecordStore(clock=lambda: NOW + timedelta(seconds=next(ticks)))


@pytest.fixture
def sql_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
