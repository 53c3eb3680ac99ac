from __future__ import annotations

from fastapi import FastAPI

from chat_relay.api.exception_handlers import register_exception_handlers
from chat_relay.api.schemas import HealthOut
from chat_relay.chatbot.router import router as chatbot_router
from chat_relay.core.logging import setup_logging
from chat_relay.core.metrics import PrometheusMetricsMiddleware, metrics_router
from chat_relay.core.middleware.http_logging import HttpLoggingMiddleware

setup_logging()


def create_app() -> FastAPI:
    # Settings are read per request by the dependency providers, so the app can be
    # created (and imported by pytest) without the upstream API key being set.
    app = FastAPI(
        title="Chat Relay API",
        description=(
            "Relays a user prompt to an OpenRouter chat model and returns the reply.\n\n"
            "- The upstream API key is held server-side and never exposed to callers.\n"
            "- Every response body has the shape `{\"message\": \"...\"}`.\n"
            "- Logs and metrics carry metadata only; prompts and replies are never logged."
        ),
        docs_url="/swagger",
        redoc_url="/docs",
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "chatbot",
                "description": "Send a prompt to the chat model (POST only).",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "It does not call the upstream model or check that the API key is configured."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(chatbot_router)
    return app


app = create_app()
