from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


ChatTopic = Literal["diet", "mental_health"]
ChatSender = Literal["user", "assistant"]

CHAT_TOPICS: tuple[ChatTopic, ...] = ("diet", "mental_health")


@dataclass(frozen=True)
class ChatMessage:
    id: str
    text: str
    sender: ChatSender
    timestamp: datetime
    topic: ChatTopic
