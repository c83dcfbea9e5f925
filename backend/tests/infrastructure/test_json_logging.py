"""Structured logging tests — JSON formatter output."""

import json
import logging

from canteen.infrastructure.observability import JSONFormatter


def _record(**extra):
    record = logging.LogRecord("canteen.orders", logging.WARNING, __file__, 1, "PRIORITY ORDER ALERT", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_basic_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "canteen.orders"
    assert payload["message"] == "PRIORITY ORDER ALERT"
    assert "order_id" not in payload


def test_extra_fields_surface():
    payload = json.loads(JSONFormatter().format(
        _record(order_id="o1", priority_reason="exam", unrelated="x"),
    ))
    assert payload["order_id"] == "o1"
    assert payload["priority_reason"] == "exam"
    assert "unrelated" not in payload
