"""
Unit Tests for Structured Logging
=================================

Test Coverage
-------------
- LogContext binding, nesting and restore (sync and async)
- ContextFilter stamping records, explicit extra winning
- JSONFormatter output shape
"""

import json
import logging

import pytest

from questline.core.logging import ContextFilter, JSONFormatter, LogContext, current_log_context


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("questline.test", logging.INFO, __file__, 1, "Quest %s", ("done",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestLogContext:
    def test_binds_and_restores(self):
        with LogContext(account_id="acct-1", operation="start_day"):
            bound = current_log_context()

        assert bound["account_id"] == "acct-1"
        assert bound["operation"] == "start_day"
        assert len(bound["correlation_id"]) == 8
        assert current_log_context() == {}

    def test_nested_context_inherits_outer_fields(self):
        with LogContext(account_id="acct-1", correlation_id="abc"):
            with LogContext(operation="complete_quest"):
                inner = current_log_context()
            outer = current_log_context()

        assert inner == {"account_id": "acct-1", "correlation_id": "abc", "operation": "complete_quest"}
        assert "operation" not in outer

    async def test_async_with(self):
        async with LogContext(account_id="acct-2", component="player_gateway"):
            bound = current_log_context()

        assert bound["component"] == "player_gateway"
        assert current_log_context() == {}


@pytest.mark.unit
class TestContextFilter:
    def test_stamps_bound_context(self):
        record = make_record()

        with LogContext(account_id="acct-1", operation="delete_quest"):
            ContextFilter().filter(record)

        assert record.account_id == "acct-1"
        assert record.operation == "delete_quest"

    def test_explicit_extra_wins(self):
        record = make_record(account_id="acct-9")

        with LogContext(account_id="acct-1"):
            ContextFilter().filter(record)

        assert record.account_id == "acct-9"

    def test_unbound_fields_are_placeholders(self):
        record = make_record()

        ContextFilter().filter(record)

        assert record.account_id == "N/A"
        assert record.component == "N/A"


@pytest.mark.unit
class TestJSONFormatter:
    def test_context_and_extra_fields(self):
        # Arrange
        record = make_record(event_name="quest.completed", event_payload={"xp": 50})
        with LogContext(account_id="acct-1"):
            ContextFilter().filter(record)

        # Act
        payload = json.loads(JSONFormatter().format(record))

        # Assert
        assert payload["message"] == "Quest done"
        assert payload["account_id"] == "acct-1"
        assert "operation" not in payload
        assert payload["extra"] == {"event_name": "quest.completed", "event_payload": {"xp": 50}}
