"""View-model types returned by the pipeline and analytics engines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class StageTotals:
    count: int
    total_value: Decimal


@dataclass(frozen=True)
class DateWindow:
    """Half-open instant range: start <= t < end."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class TrendPoint:
    label: str
    value: Decimal


@dataclass(frozen=True)
class TaskSummary:
    total: int
    completed: int
    open: int
    overdue: int


@dataclass(frozen=True)
class ActivitySummary:
    total: int
    today: int
    deal_related: int
    contact_related: int


@dataclass(frozen=True)
class DashboardMetrics:
    current_revenue: Decimal
    revenue_change: Decimal
    active_deals: int
    active_deal_value: Decimal
    conversion_rate: Decimal
    tasks_due_today: int
    overdue_tasks: int
