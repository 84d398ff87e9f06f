from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class AdviceRequest(BaseModel):
    topic: Literal["diet", "mental_health"]
    query: str = Field(..., min_length=1, max_length=2000)


class AdviceResponse(BaseModel):
    topic: str
    text: str
