from __future__ import annotations

import base64
import importlib
import json

import httpx
import pytest

from chat_relay.chatbot import function
from chat_relay.core.llm.deps import build_openrouter_client


@pytest.fixture
def upstream(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    """Route the serverless handler's upstream calls through a MockTransport."""

    seen: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "Hello!"}}]})

    def build_with_mock(*, settings):
        return build_openrouter_client(settings=settings, transport=httpx.MockTransport(respond))

    monkeypatch.setattr(function, "build_openrouter_client", build_with_mock)
    return seen


def test_event_success(upstream: list[httpx.Request]) -> None:
    res = function.handler({"httpMethod": "POST", "body": json.dumps({"prompt": "hi"})}, None)

    assert res == {
        "statusCode": 200,
        "headers": {"Access-Control-Allow-Origin": "*"},
        "body": json.dumps({"message": "Hello!"}),
    }
    assert len(upstream) == 1
    assert upstream[0].headers["Authorization"] == "Bearer test-key"


def test_event_base64_body(upstream: list[httpx.Request]) -> None:
    encoded = base64.b64encode(json.dumps({"prompt": "hi"}).encode()).decode()
    res = function.handler({"httpMethod": "POST", "body": encoded, "isBase64Encoded": True})
    assert res["statusCode"] == 200


def test_event_non_post(upstream: list[httpx.Request]) -> None:
    res = function.handler({"httpMethod": "GET"})
    assert res["statusCode"] == 405
    assert res["headers"] == {}
    assert upstream == []


def test_event_without_body_is_invalid_json(upstream: list[httpx.Request]) -> None:
    res = function.handler({"httpMethod": "POST"})
    assert res["statusCode"] == 400
    assert json.loads(res["body"]) == {"message": "Invalid JSON payload."}


def test_event_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    from chat_relay.core.settings import get_settings

    get_settings.cache_clear()

    res = function.handler({"httpMethod": "POST", "body": "{}"})
    assert res["statusCode"] == 500
    assert json.loads(res["body"]) == {"message": "Server configuration error: API key missing."}


def test_event_reads_netlify_key_name(
    monkeypatch: pytest.MonkeyPatch, upstream: list[httpx.Request]
) -> None:
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.setenv("AIunclesamAPIkey", "netlify-key")
    from chat_relay.core.settings import get_settings

    get_settings.cache_clear()

    res = function.handler({"httpMethod": "POST", "body": json.dumps({"prompt": "hi"})})
    assert res["statusCode"] == 200
    assert upstream[0].headers["Authorization"] == "Bearer netlify-key"


def test_event_invalid_settings_returns_500(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_TIMEOUT_SECONDS", "not-a-number")
    from chat_relay.core.settings import get_settings

    get_settings.cache_clear()

    res = function.handler({"httpMethod": "POST", "body": json.dumps({"prompt": "hi"})})

    assert res["statusCode"] == 500
    assert json.loads(res["body"]) == {"message": "Server configuration error: invalid settings."}


def test_module_import_configures_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str | None] = []
    monkeypatch.setattr(
        "chat_relay.core.logging.setup_logging", lambda level=None: calls.append(level)
    )

    importlib.reload(function)

    assert calls == [None]
