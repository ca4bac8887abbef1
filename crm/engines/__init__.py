"""Pure pipeline and analytics engines."""

from crm.engines.analytics import (
    active_deal_value,
    active_deals,
    activity_summary,
    compute_dashboard,
    conversion_rate,
    deals_in_range,
    overdue_tasks,
    percent_change,
    pipeline_distribution,
    recent_activities,
    revenue_for_range,
    revenue_trend,
    task_summary,
    tasks_due_today,
)
from crm.engines.dates import DateRange, previous_range, resolve_range
from crm.engines.pipeline import (
    DragPhase,
    DragSession,
    all_stage_totals,
    group_by_stage,
    pipeline_value,
    request_stage_move,
    stage_totals,
)

__all__ = [
    "DateRange",
    "DragPhase",
    "DragSession",
    "active_deal_value",
    "active_deals",
    "activity_summary",
    "all_stage_totals",
    "compute_dashboard",
    "conversion_rate",
    "deals_in_range",
    "group_by_stage",
    "overdue_tasks",
    "percent_change",
    "pipeline_distribution",
    "pipeline_value",
    "previous_range",
    "recent_activities",
    "request_stage_move",
    "resolve_range",
    "revenue_for_range",
    "revenue_trend",
    "stage_totals",
    "task_summary",
    "tasks_due_today",
]
