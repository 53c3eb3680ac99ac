from __future__ import annotations

import json
from dataclasses import dataclass, field

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RelayRequest:
    """Normalized inbound request, independent of the hosting platform."""

    http_method: str
    body: str | bytes | None
    # Correlation only; never influences the mapped response.
    request_id: str | None = None


@dataclass(frozen=True)
class RelayResponse:
    status_code: int
    # None when the upstream reply has null content; serialized as {"message": null}.
    message: str | None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def body(self) -> str:
        return json.dumps({"message": self.message})


class ChatbotMessageIn(BaseModel):
    """Documented request body (the route parses the raw body itself)."""

    prompt: str = Field(
        min_length=1,
        description="User prompt forwarded to the model.",
        examples=["What is a serverless function?"],
    )


class ChatbotMessageOut(BaseModel):
    message: str | None = Field(
        description="Model reply on success, otherwise a description of the failure.",
        examples=["A serverless function is code that runs on demand."],
    )
