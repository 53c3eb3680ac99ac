from __future__ import annotations

import httpx
from fastapi import Depends

from chat_relay.core.llm.openrouter_client import OpenRouterClient, OpenRouterConfig
from chat_relay.core.settings import Settings, load_settings


def build_openrouter_client(
    *, settings: Settings | None, transport: httpx.AsyncBaseTransport | None = None
) -> OpenRouterClient | None:
    if settings is None or not settings.openrouter_api_key:
        return None

    config = OpenRouterConfig(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        model=settings.openrouter_model,
        system_prompt=settings.openrouter_system_prompt,
        app_title=settings.openrouter_app_title,
        timeout_seconds=settings.openrouter_timeout_seconds,
        send_attribution_headers=settings.openrouter_send_attribution_headers,
        referer=settings.openrouter_referer,
    )
    return OpenRouterClient(config=config, transport=transport)


def get_chat_client(
    settings: Settings | None = Depends(load_settings),
) -> OpenRouterClient | None:
    """
    Dependency provider for the upstream chat client.

    Returns None when the API key is missing or the settings are invalid, so the
    relay handler answers with its configuration error instead of failing
    dependency resolution.
    """

    return build_openrouter_client(settings=settings)
