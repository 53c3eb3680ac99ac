from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Liveness probe payload for the relay process."""

    status: Literal["ok"] = Field(
        description=(
            "Always `ok` while the relay answers HTTP. Says nothing about the upstream "
            "model or whether the API key is set."
        ),
        examples=["ok"],
    )
