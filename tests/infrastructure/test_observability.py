"""Structured Logging — JSON formatter keys and extras."""

import json
import logging

from taskflow.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "taskflow.services.pipeline", logging.WARNING, __file__, 1,
        "CreateTask failed: %s", ("ACCESS_DENIED",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_keys():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "taskflow.services.pipeline"
    assert payload["message"] == "CreateTask failed: ACCESS_DENIED"
    assert "timestamp" in payload


def test_json_formatter_surfaces_known_extras_only():
    payload = json.loads(JSONFormatter().format(_record(
        request_type="CreateTask", elapsed_ms=12.5, password="Secret#123",
    )))
    assert payload["request_type"] == "CreateTask"
    assert payload["elapsed_ms"] == 12.5
    assert "password" not in payload
