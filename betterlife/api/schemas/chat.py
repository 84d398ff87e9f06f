from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class OpenChatSessionRequest(BaseModel):
    topic: Literal["diet", "mental_health"]


class SendChatMessageRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class ChatMessageResponse(BaseModel):
    id: str
    text: str
    sender: str
    timestamp: datetime
    topic: str


class ChatSessionResponse(BaseModel):
    session_id: str
    topic: str
    busy: bool
    messages: list[ChatMessageResponse]


class SendChatMessageResponse(BaseModel):
    user_message: ChatMessageResponse
    reply: ChatMessageResponse
