"""Deal pipeline operations over a record store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from crm.core.config import get_config
from crm.core.enums import ActivityType, DealStage
from crm.core.exceptions import NotFoundError
from crm.core.logging import LogContext, build_log_event
from crm.engines.pipeline import (
    DragSession,
    all_stage_totals,
    group_by_stage,
    pipeline_value,
    request_stage_move,
)
from crm.schemas.analytics import StageTotals
from crm.schemas.entities import Deal
from crm.services.activity_service import ActivityService
from crm.store.base import EntityType, RecordStore

logger = logging.getLogger(__name__)


class PipelineService:
    """Loads deals, applies stage moves through the pipeline engine and persists them."""

    def __init__(self, store: RecordStore, activities: ActivityService | None = None) -> None:
        self.store = store
        self.activities = activities or ActivityService(store)

    def deals(self) -> list[Deal]:
        return self.store.list(EntityType.DEAL)

    def get_deal(self, deal_id: int) -> Deal:
        deal = self.store.get(EntityType.DEAL, deal_id)
        if deal is None:
            raise NotFoundError(f"Deal not found: {deal_id}")
        return deal

    def board(self) -> dict[DealStage, list[Deal]]:
        return group_by_stage(self.deals())

    def totals(self) -> dict[DealStage, StageTotals]:
        return all_stage_totals(self.deals())

    def search(self, query: str = "") -> list[Deal]:
        needle = query.strip().lower()
        return [deal for deal in self.deals() if needle in deal.title.lower()]

    def total_pipeline_value(self, query: str = "") -> Decimal:
        return pipeline_value(self.search(query))

    def create_deal(self, fields: Mapping[str, Any]) -> Deal:
        deal = self.store.create(EntityType.DEAL, fields)
        self.activities.log(
            ActivityType.DEAL_CREATED,
            f"Deal '{deal.title}' created",
            contact_id=deal.contact_id,
            deal_id=deal.id,
        )
        return deal

    def update_deal(self, deal_id: int, fields: Mapping[str, Any]) -> Deal:
        deal = self.store.update(EntityType.DEAL, deal_id, fields)
        self.activities.log(
            ActivityType.DEAL_UPDATED,
            f"Deal '{deal.title}' updated",
            contact_id=deal.contact_id,
            deal_id=deal.id,
        )
        return deal

    def delete_deal(self, deal_id: int) -> bool:
        return self.store.delete(EntityType.DEAL, deal_id)

    def move_deal(self, deal: Deal | int, target_stage: DealStage | str, now: datetime | None = None) -> Deal:
        """Move a deal to `target_stage` and persist it; no-op when already there."""
        current = self.get_deal(deal) if isinstance(deal, int) else deal
        moved = request_stage_move(current, target_stage, now)
        if moved is current:
            return current

        saved = self.store.update(
            EntityType.DEAL, moved.id, {"stage": moved.stage, "updated_at": moved.updated_at}
        )
        self.activities.log(
            ActivityType.DEAL_STAGE_CHANGED,
            f"Deal '{saved.title}' moved from {current.stage.value} to {saved.stage.value}",
            contact_id=saved.contact_id,
            deal_id=saved.id,
        )
        context = LogContext(
            session_active=get_config().SESSION_ACTIVE,
            entity_type=EntityType.DEAL.value,
            entity_id=saved.id,
        )
        logger.info(
            "pipeline.deal.stage_changed",
            extra=build_log_event(
                "pipeline.deal.stage_changed",
                context,
                from_stage=current.stage.value,
                to_stage=saved.stage.value,
            ),
        )
        return saved

    def drag_session(self) -> DragSession:
        """A drag state machine whose drops persist through this service."""
        return DragSession(mover=self.move_deal)
