from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("chat_relay.config")

DEFAULT_SYSTEM_PROMPT = (
    "You are a friendly, concise, and helpful Netlify chat bot powered by OpenRouter. "
    "Respond briefly."
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "chat-relay"
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )

    # Upstream LLM integration (OpenRouter)
    # IMPORTANT: the API key is a secret. Never log it or echo it back to callers.
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "AIunclesamAPIkey",
            "OPENROUTER_API_KEY",
            "openrouter_api_key",
        ),
        description="OpenRouter API key (required for the chatbot endpoint).",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        validation_alias=AliasChoices("OPENROUTER_BASE_URL", "openrouter_base_url"),
        description="Base URL for the OpenRouter API (override for proxies/emulators).",
    )
    openrouter_model: str = Field(
        default="mistralai/mistral-7b-instruct-v0.2",
        validation_alias=AliasChoices("OPENROUTER_MODEL", "openrouter_model"),
        description="Model identifier sent with every chat completion request.",
    )
    openrouter_app_title: str = Field(
        default="Netlify Chat Demo App",
        validation_alias=AliasChoices("OPENROUTER_APP_TITLE", "openrouter_app_title"),
        description="App title sent as the `X-Title` field of the request body.",
    )
    openrouter_system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        validation_alias=AliasChoices("OPENROUTER_SYSTEM_PROMPT", "openrouter_system_prompt"),
        description="System (persona) message prepended to every prompt.",
    )
    openrouter_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices(
            "OPENROUTER_TIMEOUT_SECONDS",
            "openrouter_timeout_seconds",
        ),
        description="Timeout for upstream requests (seconds). Unset means wait indefinitely.",
    )
    openrouter_send_attribution_headers: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "OPENROUTER_SEND_ATTRIBUTION_HEADERS",
            "openrouter_send_attribution_headers",
        ),
        description="Also send `X-Title`/`HTTP-Referer` as HTTP headers (OpenRouter convention).",
    )
    openrouter_referer: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_REFERER", "openrouter_referer"),
        description="Site URL sent as `HTTP-Referer` when attribution headers are enabled.",
    )

    cors_allow_origin: str = Field(
        default="*",
        validation_alias=AliasChoices("CORS_ALLOW_ORIGIN", "cors_allow_origin"),
        description="Value of `Access-Control-Allow-Origin` on successful chatbot replies.",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_settings() -> Settings | None:
    """Return the settings, or None when the environment holds invalid values.

    Only the names of the offending settings are logged; values may be secrets.
    """

    try:
        return get_settings()
    except ValidationError as exc:
        invalid = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        logger.error("Invalid server configuration", extra={"invalid_settings": invalid})
        return None
