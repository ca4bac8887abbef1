from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from crm.core.exceptions import ValidationError
from crm.engines.dates import DateRange, month_window, previous_range, resolve_range


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_this_month_is_half_open(now):
    window = resolve_range("thisMonth", now)
    assert window.start == _utc(2026, 10, 1)
    assert window.end == _utc(2026, 11, 1)
    assert window.contains(window.start)
    assert not window.contains(window.end)


def test_last_month_and_its_previous(now):
    assert resolve_range(DateRange.LAST_MONTH, now).start == _utc(2026, 9, 1)
    assert previous_range(DateRange.LAST_MONTH, now).start == _utc(2026, 8, 1)
    assert previous_range(DateRange.LAST_MONTH, now).end == _utc(2026, 9, 1)


def test_quarter_windows(now):
    current = resolve_range("quarter", now)
    previous = previous_range("quarter", now)
    assert (current.start, current.end) == (_utc(2026, 10, 1), _utc(2027, 1, 1))
    assert (previous.start, previous.end) == (_utc(2026, 7, 1), _utc(2026, 10, 1))


def test_year_windows(now):
    assert resolve_range("year", now).start == _utc(2026, 1, 1)
    assert previous_range("year", now).start == _utc(2025, 1, 1)
    assert previous_range("year", now).end == _utc(2026, 1, 1)


def test_month_window_crosses_year_boundary():
    window = month_window(_utc(2026, 1, 15), -1)
    assert (window.start, window.end) == (_utc(2025, 12, 1), _utc(2026, 1, 1))


def test_windows_follow_reference_timezone():
    tokyo = timezone(timedelta(hours=9))
    window = resolve_range("thisMonth", datetime(2026, 11, 1, 2, 0, tzinfo=tokyo))
    assert window.start == datetime(2026, 11, 1, tzinfo=tokyo)


def test_naive_reference_is_treated_as_utc():
    assert resolve_range("year", datetime(2026, 5, 5)).start == _utc(2026, 1, 1)


def test_unknown_range_is_rejected(now):
    with pytest.raises(ValidationError):
        resolve_range("fortnight", now)
