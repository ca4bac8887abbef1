"""Entity and view-model schemas."""

from crm.schemas.analytics import (
    ActivitySummary,
    DashboardMetrics,
    DateWindow,
    StageTotals,
    TaskSummary,
    TrendPoint,
)
from crm.schemas.entities import Activity, Company, Contact, Deal, Entity, Lead, Task

__all__ = [
    "Activity",
    "ActivitySummary",
    "Company",
    "Contact",
    "DashboardMetrics",
    "DateWindow",
    "Deal",
    "Entity",
    "Lead",
    "StageTotals",
    "Task",
    "TaskSummary",
    "TrendPoint",
]
