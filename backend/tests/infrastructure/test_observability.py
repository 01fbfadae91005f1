"""Structured Logging: verifies the JSON formatter surfaces sync context fields."""

import json
import logging

from boardsync.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "boardsync.test", logging.ERROR, __file__, 1, "Sync save failed", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_sync_fields():
    line = JSONFormatter().format(_record(
        table="Tasks", operation="write", error_code="TRANSIENT_IO_ERROR", cycle=3,
    ))
    log = json.loads(line)
    assert log["level"] == "ERROR"
    assert log["message"] == "Sync save failed"
    assert log["table"] == "Tasks"
    assert log["cycle"] == 3
    assert log["error_code"] == "TRANSIENT_IO_ERROR"


def test_json_formatter_omits_absent_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert "table" not in log
    assert "entity_id" not in log
