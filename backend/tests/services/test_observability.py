"""Structured logging — JSON records and handler installation."""

import json
import logging

from marketplace.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "marketplace.services.listing_store", logging.INFO, __file__, 1,
        "Listing %s created", ("abc",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_record_has_context_keys():
    line = JSONFormatter().format(_record(listing_id="abc", username="alice", secret="x"))
    entry = json.loads(line)
    assert entry["message"] == "Listing abc created"
    assert entry["level"] == "INFO"
    assert entry["listing_id"] == "abc"
    assert entry["username"] == "alice"
    assert "secret" not in entry


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    previous_level = root.level
    try:
        first = setup_logging("DEBUG", "text")
        second = setup_logging("WARNING", "json")
        assert first not in root.handlers
        assert second in root.handlers
        assert root.level == logging.WARNING
        assert isinstance(second.formatter, JSONFormatter)
    finally:
        root.removeHandler(second)
        root.setLevel(previous_level)
