from __future__ import annotations

import logging

from betterlife.application.dto.chat import ChatSessionOutput, SendChatMessageOutput
from betterlife.application.ports.chat_session_port import ChatSessionPort
from betterlife.domain.entities.chat import CHAT_TOPICS, ChatTopic
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.exceptions import ChatSessionNotFoundError
from betterlife.domain.services.chat_transcript import ChatTranscript, welcome_text

from .get_advice import GetAdviceUseCase


logger = logging.getLogger(__name__)


def _session_output(transcript: ChatTranscript) -> ChatSessionOutput:
    return ChatSessionOutput(
        session_id=transcript.session_id,
        topic=transcript.topic,
        busy=transcript.busy,
        messages=transcript.messages,
    )


def _owned_session(sessions: ChatSessionPort, session_id: str, profile: UserProfile | None) -> ChatTranscript:
    transcript = sessions.get(session_id)
    owner_id = profile.id if profile is not None else None
    if transcript is None or transcript.owner_id != owner_id:
        raise ChatSessionNotFoundError("Chat session not found.")
    return transcript


class OpenChatSessionUseCase:
    def __init__(self, *, sessions: ChatSessionPort):
        self._sessions = sessions

    def execute(self, *, topic: ChatTopic, profile: UserProfile | None) -> ChatSessionOutput:
        if topic not in CHAT_TOPICS:
            raise ValueError(f"Unsupported chat topic: {topic}")
        transcript = self._sessions.open(
            topic=topic,
            owner_id=profile.id if profile is not None else None,
        )
        transcript.append(text=welcome_text(topic, profile), sender="assistant")
        logger.info("chat: session_opened id=%s topic=%s", transcript.session_id, topic)
        return _session_output(transcript)


class GetChatSessionUseCase:
    def __init__(self, *, sessions: ChatSessionPort):
        self._sessions = sessions

    def execute(self, *, session_id: str, profile: UserProfile | None) -> ChatSessionOutput:
        return _session_output(_owned_session(self._sessions, session_id, profile))


class CloseChatSessionUseCase:
    def __init__(self, *, sessions: ChatSessionPort):
        self._sessions = sessions

    def execute(self, *, session_id: str, profile: UserProfile | None) -> None:
        _owned_session(self._sessions, session_id, profile)
        self._sessions.close(session_id)
        logger.info("chat: session_closed id=%s", session_id)


class SendChatMessageUseCase:
    def __init__(self, *, sessions: ChatSessionPort, get_advice_use_case: GetAdviceUseCase):
        self._sessions = sessions
        self._get_advice = get_advice_use_case

    def execute(self, *, session_id: str, text: str, profile: UserProfile | None) -> SendChatMessageOutput:
        if not text or not text.strip():
            raise ValueError("Message text is required.")

        transcript = _owned_session(self._sessions, session_id, profile)
        transcript.begin_reply()
        try:
            user_message = transcript.append(text=text, sender="user")
            reply_text = self._get_advice.execute(topic=transcript.topic, query=text, profile=profile)
            reply = transcript.append(text=reply_text, sender="assistant")
        finally:
            transcript.end_reply()

        return SendChatMessageOutput(user_message=user_message, reply=reply)
