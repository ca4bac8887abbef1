"""Pipeline engine: stage grouping, per-stage totals and stage moves.

Every stage is a legal destination from every other stage. Sales processes
move backwards (Negotiation -> Qualification) and skip stages, so no
forward-only workflow is enforced here.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from crm.core.enums import PIPELINE_STAGES, DealStage, normalize_deal_stage
from crm.engines.state_machine import StateMachine
from crm.schemas.analytics import StageTotals
from crm.schemas.entities import Deal, utcnow
from crm.utils.validators import coerce_amount, coerce_choice, coerce_moment, coerce_records

logger = logging.getLogger(__name__)


def coerce_stage(value: DealStage | str) -> DealStage:
    return coerce_choice(normalize_deal_stage, value)


def group_by_stage(deals: Iterable[Deal | dict[str, Any]]) -> dict[DealStage, list[Deal]]:
    """Partition deals by stage; every stage is present, in board order."""
    grouped: dict[DealStage, list[Deal]] = {stage: [] for stage in PIPELINE_STAGES}
    for deal in coerce_records(Deal, deals):
        grouped[deal.stage].append(deal)
    return grouped


def total_value(deals: Iterable[Deal]) -> Decimal:
    """Sum of deal values; every value must be a finite number."""
    total = Decimal(0)
    for deal in deals:
        total += coerce_amount(deal.value, label=f"Deal {deal.id} value")
    return total


def stage_totals(deals: Iterable[Deal | dict[str, Any]], stage: DealStage | str) -> StageTotals:
    target = coerce_stage(stage)
    matching = [deal for deal in coerce_records(Deal, deals) if deal.stage is target]
    return StageTotals(count=len(matching), total_value=total_value(matching))


def all_stage_totals(deals: Iterable[Deal | dict[str, Any]]) -> dict[DealStage, StageTotals]:
    grouped = group_by_stage(deals)
    return {
        stage: StageTotals(count=len(items), total_value=total_value(items))
        for stage, items in grouped.items()
    }


def pipeline_value(deals: Iterable[Deal | dict[str, Any]]) -> Decimal:
    return total_value(coerce_records(Deal, deals))


def request_stage_move(deal: Deal, target_stage: DealStage | str, now: datetime | None = None) -> Deal:
    """Return `deal` moved to `target_stage`; the same object when already there.

    The engine performs no I/O. Persisting the returned record is the caller's job.
    """
    (deal,) = coerce_records(Deal, [deal])
    target = coerce_stage(target_stage)
    if target is deal.stage:
        return deal

    moment = coerce_moment(now) if now is not None else utcnow()
    # updated_at must strictly advance, even with a stale injected clock.
    if moment <= deal.updated_at:
        moment = deal.updated_at + timedelta(microseconds=1)
    return deal.model_copy(update={"stage": target, "updated_at": moment})


class DragPhase(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    HOVERING = "hovering"


_DRAG_TRANSITIONS = {
    DragPhase.IDLE: {"drag_start": DragPhase.DRAGGING},
    DragPhase.DRAGGING: {
        "drag_over": DragPhase.HOVERING,
        "drag_leave": DragPhase.DRAGGING,
        "drag_end": DragPhase.IDLE,
    },
    DragPhase.HOVERING: {
        "drag_over": DragPhase.HOVERING,
        "drag_leave": DragPhase.DRAGGING,
        "drop": DragPhase.IDLE,
        "drag_end": DragPhase.IDLE,
    },
}

StageMover = Callable[[Deal, DealStage], Any]


class DragSession:
    """Headless drag-and-drop state machine for the pipeline board.

    Phases: IDLE -> DRAGGING (drag_start) -> HOVERING (drag_over) -> IDLE (drop).
    ``drag_end`` abandons the drag without side effects and is a no-op when
    already idle, since pointer drags always finish with a drag-end event.
    """

    def __init__(self, mover: StageMover | None = None) -> None:
        self._mover: StageMover = mover or request_stage_move
        self._machine = StateMachine(_DRAG_TRANSITIONS)
        self.phase = DragPhase.IDLE
        self.deal: Deal | None = None
        self.candidate_stage: DealStage | None = None

    def _fire(self, event: str) -> None:
        self.phase = self._machine.next_state(self.phase, event)

    def _reset(self) -> None:
        self.phase = DragPhase.IDLE
        self.deal = None
        self.candidate_stage = None

    def drag_start(self, deal: Deal) -> None:
        (validated,) = coerce_records(Deal, [deal])
        self._fire("drag_start")
        self.deal = validated

    def drag_over(self, stage: DealStage | str) -> None:
        target = coerce_stage(stage)
        self._fire("drag_over")
        self.candidate_stage = target

    def drag_leave(self) -> None:
        self._fire("drag_leave")
        self.candidate_stage = None

    def drop(self) -> Any:
        """Finish the drag over the hovered stage; returns the mover's result or None."""
        self._machine.next_state(self.phase, "drop")
        deal, target = self.deal, self.candidate_stage
        self._reset()

        if deal is None or target is None or target is deal.stage:
            return None
        logger.debug(
            "pipeline.drag.drop",
            extra={"event": "pipeline.drag.drop", "deal_id": deal.id, "from_stage": deal.stage.value, "to_stage": target.value},
        )
        return self._mover(deal, target)

    def drag_end(self) -> None:
        if self.phase is DragPhase.IDLE:
            return
        self._fire("drag_end")
        self._reset()
