from __future__ import annotations

import json
import logging
import sys

from chat_relay.core.logging import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="chat_relay.chatbot",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="Upstream API error",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_missing_extra_fields_render_as_null() -> None:
    payload = json.loads(JsonFormatter().format(_record()))

    assert payload["level"] == "ERROR"
    assert payload["logger"] == "chat_relay.chatbot"
    assert payload["message"] == "Upstream API error"
    assert payload["request_id"] is None
    assert payload["upstream_status"] is None
    assert "exception" not in payload


def test_extra_fields_and_exception_are_included() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record(request_id="req-1", http_method="POST", upstream_status=429)
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["request_id"] == "req-1"
    assert payload["method"] == "POST"
    assert payload["upstream_status"] == 429
    assert "RuntimeError: boom" in payload["exception"]
