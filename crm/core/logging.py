"""Structured logging helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Normalized context fields expected in structured logs."""

    session_active: bool | None = None
    user_id: str | None = None
    entity_type: str | None = None
    entity_id: int | None = None


def build_log_event(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Build a normalized structured log payload."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "session_active": context.session_active,
        "user_id": context.user_id,
        "entity_type": context.entity_type,
        "entity_id": context.entity_id,
    }
    payload.update(fields)
    return payload
