"""Dashboard assembly: one consistent snapshot per refresh, handed to the analytics engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from crm.core.config import Config, get_config
from crm.engines.analytics import compute_dashboard, pipeline_distribution, recent_activities, revenue_trend
from crm.engines.dates import DateRange
from crm.schemas.analytics import DashboardMetrics, TrendPoint
from crm.schemas.entities import Activity, Contact, Deal, Lead, Task
from crm.store.base import EntityType, RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    contacts: list[Contact] = field(default_factory=list)
    deals: list[Deal] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    activities: list[Activity] = field(default_factory=list)
    leads: list[Lead] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardView:
    metrics: DashboardMetrics
    revenue_trend: list[TrendPoint]
    pipeline_distribution: dict[str, int]
    recent_activities: list[Activity]
    contact_count: int


class DashboardService:
    def __init__(self, store: RecordStore, config: Config | None = None) -> None:
        self.store = store
        self.config = config or get_config()

    def load_snapshot(self) -> DashboardSnapshot:
        snapshot = DashboardSnapshot(
            contacts=self.store.list(EntityType.CONTACT),
            deals=self.store.list(EntityType.DEAL),
            tasks=self.store.list(EntityType.TASK),
            activities=self.store.list(EntityType.ACTIVITY),
            leads=self.store.list(EntityType.LEAD),
        )
        logger.debug(
            "dashboard.snapshot.loaded deals=%d leads=%d tasks=%d",
            len(snapshot.deals),
            len(snapshot.leads),
            len(snapshot.tasks),
            extra={"event": "dashboard.snapshot.loaded"},
        )
        return snapshot

    def build(
        self,
        date_range: DateRange | str | None = None,
        now: datetime | None = None,
        snapshot: DashboardSnapshot | None = None,
    ) -> DashboardView:
        data = snapshot or self.load_snapshot()
        selected = date_range or self.config.DEFAULT_DATE_RANGE
        return DashboardView(
            metrics=compute_dashboard(data.deals, data.leads, data.tasks, selected, now),
            revenue_trend=revenue_trend(data.deals, self.config.REVENUE_TREND_MONTHS, now),
            pipeline_distribution=pipeline_distribution(data.deals),
            recent_activities=recent_activities(data.activities, self.config.RECENT_ACTIVITY_LIMIT),
            contact_count=len(data.contacts),
        )
