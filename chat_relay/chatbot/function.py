"""Serverless entry point.

Platforms in the Netlify/AWS Lambda family invoke `handler(event, context)` with
an event carrying `httpMethod` and a string `body`, and expect
`{"statusCode", "headers", "body"}` back.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
from collections.abc import Mapping
from typing import Any

from chat_relay.chatbot.handler import build_relay_handler
from chat_relay.chatbot.schemas import RelayRequest, RelayResponse
from chat_relay.core.llm.deps import build_openrouter_client
from chat_relay.core.logging import setup_logging
from chat_relay.core.settings import load_settings

setup_logging()


def _event_body(event: Mapping[str, Any]) -> str | bytes | None:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            # Surfaces as "Invalid JSON payload." in the relay.
            return None
    return body


def _event_request_id(event: Mapping[str, Any]) -> str | None:
    headers = event.get("headers") or {}
    for key, value in headers.items():
        if str(key).lower() == "x-request-id":
            return str(value)
    return None


def to_event_response(response: RelayResponse) -> dict[str, Any]:
    return {
        "statusCode": response.status_code,
        "headers": dict(response.headers),
        "body": response.body,
    }


def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    settings = load_settings()
    relay = build_relay_handler(
        settings=settings,
        chat_client=build_openrouter_client(settings=settings),
    )
    request = RelayRequest(
        http_method=str(event.get("httpMethod") or ""),
        body=_event_body(event),
        request_id=_event_request_id(event),
    )
    return to_event_response(asyncio.run(relay.handle(request)))
