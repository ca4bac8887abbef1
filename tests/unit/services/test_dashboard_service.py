from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from crm.core.config import get_config
from crm.services.dashboard_service import DashboardService
from crm.store.base import EntityType


@pytest.fixture
def seeded_store(memory_store, now):
    memory_store.seed(
        EntityType.DEAL,
        [
            {"Id": 1, "title": "A", "value": 5000, "stage": "Won", "contactId": 1, "createdAt": now - timedelta(days=2), "updatedAt": now},
            {"Id": 2, "title": "B", "value": 2000, "stage": "Proposal", "contactId": 1, "createdAt": now - timedelta(days=40), "updatedAt": now},
            {"Id": 3, "title": "C", "value": 1000, "stage": "Closed Won", "contactId": 2, "createdAt": now - timedelta(days=35), "updatedAt": now},
        ],
    )
    memory_store.seed(
        EntityType.LEAD,
        [
            {"Id": i, "name": f"Lead {i}", "company": "Acme", "email": f"l{i}@acme.example", "phone": "1", "createdAt": now}
            for i in (1, 2)
        ],
    )
    memory_store.seed(
        EntityType.TASK,
        [
            {"Id": 1, "title": "Today", "dueDate": now.date(), "status": "pending", "createdAt": now},
            {"Id": 2, "title": "Late", "dueDate": now.date() - timedelta(days=1), "createdAt": now},
        ],
    )
    memory_store.seed(EntityType.CONTACT, [{"Id": 1, "name": "Pat", "createdAt": now}])
    return memory_store


def test_build_dashboard_view(seeded_store, now):
    get_config.cache_clear()
    view = DashboardService(seeded_store).build(now=now)
    metrics = view.metrics

    assert metrics.current_revenue == Decimal("5000")
    assert metrics.revenue_change == Decimal("400")
    assert metrics.active_deals == 1
    assert metrics.active_deal_value == Decimal("2000")
    assert metrics.conversion_rate == Decimal("50")
    assert metrics.tasks_due_today == 1
    assert metrics.overdue_tasks == 1
    assert [point.label for point in view.revenue_trend][-1] == "Oct"
    assert view.revenue_trend[-2].value == Decimal("1000")
    assert view.pipeline_distribution["Closed Won"] == 2
    assert view.contact_count == 1


def test_explicit_range_overrides_default(seeded_store, now):
    view = DashboardService(seeded_store).build(date_range="lastMonth", now=now)
    assert view.metrics.current_revenue == Decimal("1000")
