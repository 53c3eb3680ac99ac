from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

UNKNOWN_API_ERROR = "Unknown API error"


class ChatClientError(Exception):
    """Base error for chat completion client failures."""


class UpstreamAPIError(ChatClientError):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, *, status_code: int, details: str):
        super().__init__(details)
        self.status_code = status_code
        self.details = details


class UpstreamResponseError(ChatClientError):
    """Raised on transport failures or an upstream body of unexpected shape.

    The message is the description of the underlying cause, which is chained.
    """


@dataclass(frozen=True)
class OpenRouterConfig:
    api_key: str
    base_url: str
    model: str
    system_prompt: str
    app_title: str
    timeout_seconds: float | None = None
    send_attribution_headers: bool = False
    referer: str | None = None


def extract_error_details(data: Any) -> str:
    """Return `error.message` from an upstream error body, or a fixed fallback."""

    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if message:
        return str(message)
    return UNKNOWN_API_ERROR


def extract_reply(data: Any) -> str | None:
    """Return `choices[0].message.content` from a successful upstream body.

    The content is passed through as-is; OpenRouter may send null.
    """

    try:
        return data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamResponseError(
            f"Unexpected upstream response shape: {type(exc).__name__}: {exc}"
        ) from exc


class OpenRouterClient:
    """
    Minimal OpenRouter chat completion client.

    - One request per call: no retries, no streaming, no conversation state.
    - The upstream body is parsed as JSON regardless of the status code, since
      OpenRouter reports failures as `{"error": {"message": ...}}`.
    - No prompt/reply logging in this module.
    """

    def __init__(
        self,
        *,
        config: OpenRouterConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        # Tests inject httpx.MockTransport here.
        self._transport = transport

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        if self._config.send_attribution_headers:
            headers["X-Title"] = self._config.app_title
            if self._config.referer:
                headers["HTTP-Referer"] = self._config.referer
        return headers

    def build_payload(self, *, prompt: str) -> dict[str, Any]:
        return {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": self._config.system_prompt},
                {"role": "user", "content": prompt},
            ],
            # Body field, not a header. See send_attribution_headers for the header form.
            "X-Title": self._config.app_title,
        }

    async def complete(self, *, prompt: str) -> str | None:
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                resp = await client.post(
                    url, headers=self.build_headers(), json=self.build_payload(prompt=prompt)
                )
        except httpx.HTTPError as exc:
            raise UpstreamResponseError(str(exc) or type(exc).__name__) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamResponseError(f"Upstream returned invalid JSON: {exc}") from exc

        if not resp.is_success:
            raise UpstreamAPIError(
                status_code=resp.status_code, details=extract_error_details(data)
            )

        return extract_reply(data)
