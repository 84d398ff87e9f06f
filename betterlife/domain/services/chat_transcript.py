from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from uuid import uuid4

from betterlife.domain.entities.chat import ChatMessage, ChatSender, ChatTopic
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.exceptions import ChatSessionBusyError


WELCOME_TEMPLATES: dict[ChatTopic, str] = {
    "diet": (
        "Hello {name}! I'm your AI nutrition assistant. I can help you with meal planning, "
        "dietary advice, and nutrition questions tailored for Kenyan athletes. "
        "What would you like to know?"
    ),
    "mental_health": (
        "Hi {name}! I'm here to provide mental health support and guidance. I can help with "
        "stress management, motivation, and emotional wellness for athletes. "
        "How can I support you today?"
    ),
}


def welcome_text(topic: ChatTopic, profile: UserProfile | None) -> str:
    name = profile.full_name if profile is not None and profile.full_name else "there"
    return WELCOME_TEMPLATES[topic].format(name=name)


class ChatTranscript:
    """Append-only message log for one open chat window.

    At most one reply may be pending at a time; ``begin_reply`` claims the
    slot and ``end_reply`` releases it.
    """

    def __init__(self, *, session_id: str, topic: ChatTopic, owner_id: str | None = None):
        self.session_id = session_id
        self.topic = topic
        self.owner_id = owner_id
        self._messages: list[ChatMessage] = []
        self._busy = False
        self._lock = Lock()

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        with self._lock:
            return tuple(self._messages)

    @property
    def busy(self) -> bool:
        return self._busy

    def append(self, *, text: str, sender: ChatSender, now: datetime | None = None) -> ChatMessage:
        message = ChatMessage(
            id=uuid4().hex,
            text=text,
            sender=sender,
            timestamp=now or datetime.now(timezone.utc),
            topic=self.topic,
        )
        with self._lock:
            self._messages.append(message)
        return message

    def begin_reply(self) -> None:
        with self._lock:
            if self._busy:
                raise ChatSessionBusyError("A reply is already in progress.")
            self._busy = True

    def end_reply(self) -> None:
        with self._lock:
            self._busy = False
