from __future__ import annotations

from typing import Protocol

from betterlife.domain.entities.chat import ChatTopic
from betterlife.domain.services.chat_transcript import ChatTranscript


class ChatSessionPort(Protocol):
    def open(self, *, topic: ChatTopic, owner_id: str | None) -> ChatTranscript:
        ...

    def get(self, session_id: str) -> ChatTranscript | None:
        ...

    def close(self, session_id: str) -> bool:
        ...
