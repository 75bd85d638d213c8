"""
Tests for the JSON log formatter.
"""
import json
import logging

from core.logging_config import JSONFormatter, clear_request_id, set_request_id


def _record(message, **extra):
    record = logging.LogRecord("services.vitals_service", logging.WARNING, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_one_json_line_with_extra():
    line = JSONFormatter().format(_record("Critical alert", alert_id="alert:p1:1-HeartRate"))
    entry = json.loads(line)
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "services.vitals_service"
    assert entry["message"] == "Critical alert"
    assert entry["extra"] == {"alert_id": "alert:p1:1-HeartRate"}
    assert entry["timestamp"].endswith("Z")
    assert "\n" not in line


def test_includes_request_id_from_context():
    set_request_id("abcd1234")
    try:
        entry = json.loads(JSONFormatter().format(_record("hello")))
    finally:
        clear_request_id()
    assert entry["request_id"] == "abcd1234"
    assert "extra" not in entry
