from __future__ import annotations

import json
import logging

from crm.core.logging import LogContext, build_log_event
from crm.core.logging_config import JsonFormatter


def test_json_formatter_includes_event_fields():
    extra = build_log_event(
        "pipeline.deal.stage_changed",
        LogContext(session_active=True, entity_type="deal", entity_id=7),
        from_stage="Proposal",
        to_stage="Closed Won",
    )
    record = logging.LogRecord("crm.test", logging.INFO, __file__, 1, "moved", None, None)
    for key, value in extra.items():
        setattr(record, key, value)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "pipeline.deal.stage_changed"
    assert payload["entity_id"] == 7
    assert payload["session_active"] is True
    assert payload["to_stage"] == "Closed Won"
