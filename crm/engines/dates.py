"""Calendar window helpers for dashboard date ranges.

Windows are half-open ``[start, end)`` and are computed in the timezone of the
reference instant, so "this month" means the caller's month.
"""

from __future__ import annotations

import enum
from datetime import date, datetime

from crm.core.exceptions import ValidationError
from crm.schemas.analytics import DateWindow
from crm.utils.validators import coerce_moment


class DateRange(str, enum.Enum):
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    QUARTER = "quarter"
    YEAR = "year"


def _coerce_range(value: DateRange | str) -> DateRange:
    try:
        return DateRange(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown date range: {value!r}") from exc


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Return (year, month) moved by `offset` calendar months."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _at(now: datetime, year: int, month: int, day: int = 1) -> datetime:
    return datetime(year, month, day, tzinfo=now.tzinfo)


def local_date(moment: datetime, reference: datetime) -> date:
    """Calendar date of `moment` as seen from the timezone of `reference`."""
    return moment.astimezone(reference.tzinfo).date()


def month_window(now: datetime, offset: int = 0) -> DateWindow:
    """Calendar month `offset` months away from the month containing `now`."""
    now = coerce_moment(now)
    year, month = shift_month(now.year, now.month, offset)
    next_year, next_month = shift_month(year, month, 1)
    return DateWindow(start=_at(now, year, month), end=_at(now, next_year, next_month))


def quarter_window(now: datetime, offset: int = 0) -> DateWindow:
    now = coerce_moment(now)
    first_month = ((now.month - 1) // 3) * 3 + 1
    year, month = shift_month(now.year, first_month, offset * 3)
    next_year, next_month = shift_month(year, month, 3)
    return DateWindow(start=_at(now, year, month), end=_at(now, next_year, next_month))


def year_window(now: datetime, offset: int = 0) -> DateWindow:
    now = coerce_moment(now)
    year = now.year + offset
    return DateWindow(start=_at(now, year, 1), end=_at(now, year + 1, 1))


def resolve_range(date_range: DateRange | str, now: datetime) -> DateWindow:
    """Resolve a named range to its window relative to `now`."""
    key = _coerce_range(date_range)
    if key is DateRange.THIS_MONTH:
        return month_window(now)
    if key is DateRange.LAST_MONTH:
        return month_window(now, -1)
    if key is DateRange.QUARTER:
        return quarter_window(now)
    return year_window(now)


def previous_range(date_range: DateRange | str, now: datetime) -> DateWindow:
    """The window immediately preceding `resolve_range(date_range, now)`."""
    key = _coerce_range(date_range)
    if key is DateRange.THIS_MONTH:
        return month_window(now, -1)
    if key is DateRange.LAST_MONTH:
        return month_window(now, -2)
    if key is DateRange.QUARTER:
        return quarter_window(now, -1)
    return year_window(now, -1)
