"""Structured logging — JSON formatter surfaces registry extras, setup is idempotent."""

import json
import logging

from athlete_registry.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "athlete_registry.test", logging.WARNING, __file__, 1,
        "Admission rejected", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extras():
    line = JSONFormatter().format(_record(
        owner="alice", operation="register", error_code="DUPLICATE_OWNER",
    ))
    data = json.loads(line)
    assert data["level"] == "WARNING"
    assert data["message"] == "Admission rejected"
    assert data["owner"] == "alice"
    assert data["error_code"] == "DUPLICATE_OWNER"


def test_json_formatter_omits_missing_extras():
    data = json.loads(JSONFormatter().format(_record(batch_size=None)))
    assert "batch_size" not in data
    assert "owner" not in data


def test_setup_logging_replaces_handler():
    setup_logging("DEBUG", "json")
    installed = len(logging.root.handlers)
    setup_logging("INFO", "text")
    assert len(logging.root.handlers) == installed
    assert logging.root.level == logging.INFO
