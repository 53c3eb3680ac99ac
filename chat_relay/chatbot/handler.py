from __future__ import annotations

import json
import logging
from typing import Protocol

from chat_relay.chatbot.schemas import RelayRequest, RelayResponse
from chat_relay.core.llm.openrouter_client import UpstreamAPIError
from chat_relay.core.metrics import record_upstream_outcome
from chat_relay.core.settings import Settings

logger = logging.getLogger("chat_relay.chatbot")

METHOD_NOT_ALLOWED = "Method Not Allowed. Only POST requests are accepted."
API_KEY_MISSING = "Server configuration error: API key missing."
INVALID_SETTINGS = "Server configuration error: invalid settings."
INVALID_JSON = "Invalid JSON payload."
MISSING_PROMPT = "Missing prompt in request body."


class ChatClient(Protocol):
    async def complete(self, *, prompt: str) -> str | None: ...


def _reject_constant(name: str) -> float:
    # JSON has no NaN or Infinity literals.
    raise ValueError(f"Invalid JSON constant: {name}")


class RelayHandler:
    """
    Relay a prompt to the upstream chat completion API.

    `handle()` always returns a response: every failure is mapped to a status
    code and a `{"message": ...}` body. Checks run in a fixed order and the
    first failing one wins (method, credential, JSON body, prompt).

    `chat_client` is None when the upstream credential is not configured.
    `config_error` replaces the credential message when the settings could not
    be loaded at all.
    """

    def __init__(
        self,
        *,
        chat_client: ChatClient | None,
        allow_origin: str = "*",
        config_error: str | None = None,
    ):
        self._chat_client = chat_client
        self._allow_origin = allow_origin
        self._config_error = config_error

    async def handle(self, request: RelayRequest) -> RelayResponse:
        if request.http_method != "POST":
            return RelayResponse(status_code=405, message=METHOD_NOT_ALLOWED)

        if self._config_error is not None:
            logger.error(
                "Server settings are invalid",
                extra={"request_id": request.request_id, "status_code": 500},
            )
            return RelayResponse(status_code=500, message=self._config_error)

        if self._chat_client is None:
            logger.error(
                "Upstream API key is not configured",
                extra={"request_id": request.request_id, "status_code": 500},
            )
            return RelayResponse(status_code=500, message=API_KEY_MISSING)

        try:
            data = json.loads(request.body, parse_constant=_reject_constant)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return RelayResponse(status_code=400, message=INVALID_JSON)

        prompt = data.get("prompt") if isinstance(data, dict) else None
        if not prompt or not isinstance(prompt, str):
            return RelayResponse(status_code=400, message=MISSING_PROMPT)

        try:
            reply = await self._chat_client.complete(prompt=prompt)
        except UpstreamAPIError as exc:
            record_upstream_outcome("api_error")
            logger.error(
                "Upstream API error",
                extra={
                    "request_id": request.request_id,
                    "status_code": exc.status_code,
                    "upstream_status": exc.status_code,
                },
            )
            return RelayResponse(
                status_code=exc.status_code,
                message=f"External API Error: {exc.details}",
            )
        except Exception as exc:  # noqa: BLE001 - every fault becomes a 500 response
            record_upstream_outcome("failure")
            logger.exception(
                "Chatbot relay failed",
                extra={"request_id": request.request_id, "status_code": 500},
            )
            description = str(exc) or type(exc).__name__
            return RelayResponse(status_code=500, message=f"Internal server error: {description}")

        record_upstream_outcome("success")
        return RelayResponse(
            status_code=200,
            message=reply,
            headers={"Access-Control-Allow-Origin": self._allow_origin},
        )


def build_relay_handler(
    *, settings: Settings | None, chat_client: ChatClient | None
) -> RelayHandler:
    """Wire a handler from loaded settings (None when they failed validation)."""

    if settings is None:
        return RelayHandler(chat_client=None, config_error=INVALID_SETTINGS)
    return RelayHandler(chat_client=chat_client, allow_origin=settings.cors_allow_origin)
