from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from chat_relay.chatbot.handler import RelayHandler, build_relay_handler
from chat_relay.chatbot.schemas import ChatbotMessageIn, ChatbotMessageOut, RelayRequest
from chat_relay.core.llm.deps import get_chat_client
from chat_relay.core.settings import Settings, load_settings

router = APIRouter(tags=["chatbot"])

# The relay decides which methods are allowed (405 body included), so the routes
# accept every method and hand the request over untouched.
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def get_relay_handler(
    chat_client=Depends(get_chat_client),
    settings: Settings | None = Depends(load_settings),
) -> RelayHandler:
    return build_relay_handler(settings=settings, chat_client=chat_client)


@router.api_route(
    "/chatbot",
    methods=_ALL_METHODS,
    response_model=ChatbotMessageOut,
    summary="Relay a prompt to the chat model",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": ChatbotMessageIn.model_json_schema()},
            },
        }
    },
)
@router.api_route(
    "/.netlify/functions/chatbot",
    methods=_ALL_METHODS,
    response_model=ChatbotMessageOut,
    include_in_schema=False,
)
async def relay_chatbot(
    request: Request,
    handler: RelayHandler = Depends(get_relay_handler),
) -> Response:
    """
    Forward `{"prompt": ...}` to the upstream model and return `{"message": ...}`.

    The raw body is passed to the relay as-is so malformed JSON is reported with
    the relay's own message instead of FastAPI's validation payload.
    """

    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    relay_request = RelayRequest(
        http_method=request.method,
        body=await request.body(),
        request_id=request_id,
    )
    result = await handler.handle(relay_request)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
        media_type="application/json",
    )
