from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from crm.core.enums import DealStage, TaskStatus
from crm.core.exceptions import ValidationError
from crm.schemas.entities import Deal, Lead, Task
from crm.utils.ids import IdSequence
from crm.utils.validators import coerce_amount, coerce_moment, coerce_records, sanitize_text

CREATED = datetime(2026, 9, 1, 12, 0, tzinfo=timezone.utc)


def _deal(**overrides):
    data = {"id": 1, "title": "Renewal", "value": "250", "contactId": 3, "createdAt": CREATED, "updatedAt": CREATED}
    data.update(overrides)
    return Deal.model_validate(data)


def test_deal_accepts_camel_case_and_legacy_stage():
    deal = _deal(stage="closed", expectedCloseDate="2026-12-01T00:00:00Z")
    assert deal.stage is DealStage.CLOSED_WON
    assert deal.contact_id == 3
    assert deal.value == Decimal("250")
    assert deal.expected_close_date == date(2026, 12, 1)


@pytest.mark.parametrize(
    "overrides",
    [
        {"value": -1},
        {"value": "NaN"},
        {"probability": 101},
        {"stage": "Archived"},
        {"updatedAt": CREATED - timedelta(seconds=1)},
    ],
)
def test_deal_rejects_invalid_fields(overrides):
    with pytest.raises(PydanticValidationError):
        _deal(**overrides)


def test_naive_timestamps_are_treated_as_utc():
    deal = _deal(createdAt=datetime(2026, 9, 1, 12, 0), updatedAt=datetime(2026, 9, 1, 12, 0))
    assert deal.created_at == CREATED


def test_task_status_legacy_spellings():
    task = Task(id=1, title="Call back", due_date="2026-10-20", status="In Progress", created_at=CREATED)
    assert task.status is TaskStatus.IN_PROGRESS
    assert Task(id=2, title="x", due_date="2026-10-20", status="pending", created_at=CREATED).status is TaskStatus.TO_DO


def test_lead_requires_email_shape():
    with pytest.raises(PydanticValidationError):
        Lead(id=1, name="A", company="B", email="not-an-email", phone="1", created_at=CREATED)


def test_coerce_records_reports_index():
    with pytest.raises(ValidationError, match="index 1"):
        coerce_records(Deal, [_deal(), {"id": 2, "title": "Broken"}])


def test_coerce_amount():
    assert coerce_amount("12.50") == Decimal("12.50")
    for bad in (None, True, "abc", float("inf"), Decimal("NaN")):
        with pytest.raises(ValidationError):
            coerce_amount(bad)


def test_coerce_moment():
    assert coerce_moment("2026-10-19T15:30:00Z") == datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)
    with pytest.raises(ValidationError, match="bare date"):
        coerce_moment(date(2026, 10, 19))


def test_sanitize_text_strips_null_and_trims():
    assert sanitize_text("  hello\x00world  ") == "helloworld"


def test_id_sequence_skips_observed_ids():
    sequence = IdSequence()
    assert sequence() == 1
    sequence.observe([5, 3])
    assert sequence() == 6
    sequence.observe([2])
    assert sequence() == 7
