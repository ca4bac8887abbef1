"""Analytics engine: dashboard aggregates over deal, lead, task and activity snapshots.

All functions are pure. Snapshots may hold entity models or raw mappings;
malformed records raise ValidationError instead of poisoning the aggregates.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from crm.core.enums import CLOSED_STAGES, DealStage
from crm.core.exceptions import ValidationError
from crm.engines.dates import DateRange, local_date, month_window, previous_range, resolve_range
from crm.engines.pipeline import total_value
from crm.schemas.analytics import ActivitySummary, DashboardMetrics, DateWindow, TaskSummary, TrendPoint
from crm.schemas.entities import Activity, Deal, Task, utcnow
from crm.utils.validators import coerce_amount, coerce_moment, coerce_records

HUNDRED = Decimal(100)

# Display buckets for the pipeline proportion chart. Closed Lost is not charted.
DISTRIBUTION_BUCKETS: tuple[DealStage, ...] = (
    DealStage.PROSPECTING,
    DealStage.QUALIFICATION,
    DealStage.PROPOSAL,
    DealStage.NEGOTIATION,
    DealStage.CLOSED_WON,
)


def _now(now: datetime | None) -> datetime:
    return coerce_moment(now) if now is not None else utcnow()


def is_closed_won(deal: Deal) -> bool:
    return deal.stage is DealStage.CLOSED_WON


def deals_in_range(deals: Iterable[Deal | dict[str, Any]], window: DateWindow) -> list[Deal]:
    """Deals whose created_at falls inside `window`."""
    return [deal for deal in coerce_records(Deal, deals) if window.contains(deal.created_at)]


def revenue_for_range(deals: Iterable[Deal | dict[str, Any]], window: DateWindow) -> Decimal:
    """Closed-won value of deals created inside `window`."""
    return total_value(deal for deal in deals_in_range(deals, window) if is_closed_won(deal))


def percent_change(current: Any, previous: Any) -> Decimal:
    """Period-over-period change in percent.

    Growth from nothing counts as a full +100% swing; no activity in either
    period is 0.
    """
    current_amount = coerce_amount(current, label="current")
    previous_amount = coerce_amount(previous, label="previous")
    if previous_amount > 0:
        return (current_amount - previous_amount) / previous_amount * HUNDRED
    if current_amount > 0:
        return HUNDRED
    return Decimal(0)


def active_deals(deals: Iterable[Deal | dict[str, Any]]) -> list[Deal]:
    return [deal for deal in coerce_records(Deal, deals) if deal.stage not in CLOSED_STAGES]


def active_deal_value(deals: Iterable[Deal | dict[str, Any]]) -> Decimal:
    return total_value(active_deals(deals))


def conversion_rate(leads: Sequence[Any], converted_deals: Sequence[Any]) -> Decimal:
    """Converted deals as a percentage of all leads; 0 without leads."""
    total_leads = len(leads)
    if total_leads == 0:
        return Decimal(0)
    return Decimal(len(converted_deals)) / Decimal(total_leads) * HUNDRED


def _open_tasks(tasks: Iterable[Task | dict[str, Any]]) -> list[Task]:
    return [task for task in coerce_records(Task, tasks) if not task.is_completed]


def tasks_due_today(tasks: Iterable[Task | dict[str, Any]], now: datetime | None = None) -> int:
    reference = _now(now)
    today = reference.date()
    return sum(1 for task in _open_tasks(tasks) if task.due_day(reference) == today)


def overdue_tasks(tasks: Iterable[Task | dict[str, Any]], now: datetime | None = None) -> int:
    reference = _now(now)
    today = reference.date()
    return sum(1 for task in _open_tasks(tasks) if task.due_day(reference) < today)


def revenue_trend(
    deals: Iterable[Deal | dict[str, Any]],
    months_back: int = 6,
    now: datetime | None = None,
) -> list[TrendPoint]:
    """Closed-won revenue for each of the trailing `months_back` months, oldest first."""
    if months_back < 1:
        raise ValidationError(f"months_back must be >= 1, got {months_back}")
    reference = _now(now)
    snapshot = coerce_records(Deal, deals)

    points = []
    for offset in range(months_back - 1, -1, -1):
        window = month_window(reference, -offset)
        points.append(TrendPoint(label=window.start.strftime("%b"), value=revenue_for_range(snapshot, window)))
    return points


def pipeline_distribution(deals: Iterable[Deal | dict[str, Any]]) -> dict[str, int]:
    counts = {stage.value: 0 for stage in DISTRIBUTION_BUCKETS}
    for deal in coerce_records(Deal, deals):
        if deal.stage.value in counts:
            counts[deal.stage.value] += 1
    return counts


def task_summary(tasks: Iterable[Task | dict[str, Any]], now: datetime | None = None) -> TaskSummary:
    snapshot = coerce_records(Task, tasks)
    completed = sum(1 for task in snapshot if task.is_completed)
    return TaskSummary(
        total=len(snapshot),
        completed=completed,
        open=len(snapshot) - completed,
        overdue=overdue_tasks(snapshot, now),
    )


def recent_activities(activities: Iterable[Activity | dict[str, Any]], limit: int = 8) -> list[Activity]:
    """Newest activities first."""
    snapshot = coerce_records(Activity, activities)
    return sorted(snapshot, key=lambda activity: activity.timestamp, reverse=True)[:limit]


def activity_summary(activities: Iterable[Activity | dict[str, Any]], now: datetime | None = None) -> ActivitySummary:
    reference = _now(now)
    snapshot = coerce_records(Activity, activities)
    return ActivitySummary(
        total=len(snapshot),
        today=sum(1 for a in snapshot if local_date(a.timestamp, reference) == reference.date()),
        deal_related=sum(1 for a in snapshot if a.type.is_deal_related),
        contact_related=sum(1 for a in snapshot if a.type.is_contact_related),
    )


def compute_dashboard(
    deals: Iterable[Deal | dict[str, Any]],
    leads: Iterable[Any],
    tasks: Iterable[Task | dict[str, Any]],
    date_range: DateRange | str = DateRange.THIS_MONTH,
    now: datetime | None = None,
) -> DashboardMetrics:
    """Headline KPI cards for the selected date range."""
    reference = _now(now)
    deal_snapshot = coerce_records(Deal, deals)
    lead_snapshot = list(leads)
    task_snapshot = coerce_records(Task, tasks)

    window = resolve_range(date_range, reference)
    current_revenue = revenue_for_range(deal_snapshot, window)
    previous_revenue = revenue_for_range(deal_snapshot, previous_range(date_range, reference))
    active = active_deals(deal_snapshot)

    return DashboardMetrics(
        current_revenue=current_revenue,
        revenue_change=percent_change(current_revenue, previous_revenue),
        active_deals=len(active),
        active_deal_value=total_value(active),
        conversion_rate=conversion_rate(lead_snapshot, deals_in_range(deal_snapshot, window)),
        tasks_due_today=tasks_due_today(task_snapshot, reference),
        overdue_tasks=overdue_tasks(task_snapshot, reference),
    )
