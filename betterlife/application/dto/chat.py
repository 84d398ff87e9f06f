from __future__ import annotations

from dataclasses import dataclass

from betterlife.domain.entities.chat import ChatMessage, ChatTopic


@dataclass(frozen=True)
class ChatSessionOutput:
    session_id: str
    topic: ChatTopic
    busy: bool
    messages: tuple[ChatMessage, ...]


@dataclass(frozen=True)
class SendChatMessageOutput:
    user_message: ChatMessage
    reply: ChatMessage
