from __future__ import annotations

import logging
import time
from collections import OrderedDict
from threading import Lock
from typing import Callable
from uuid import uuid4

from betterlife.application.ports.chat_session_port import ChatSessionPort
from betterlife.domain.entities.chat import ChatTopic
from betterlife.domain.services.chat_transcript import ChatTranscript


logger = logging.getLogger(__name__)


class InMemoryChatSessionRegistry(ChatSessionPort):
    """Open chat windows, least recently used first.

    Sessions idle longer than ``idle_ttl_seconds`` are dropped, and opening
    a session beyond ``max_sessions`` evicts the least recently used one.
    """

    def __init__(
        self,
        *,
        idle_ttl_seconds: float = 1800,
        max_sessions: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._idle_ttl_seconds = idle_ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: OrderedDict[str, tuple[ChatTranscript, float]] = OrderedDict()
        self._lock = Lock()

    def open(self, *, topic: ChatTopic, owner_id: str | None) -> ChatTranscript:
        transcript = ChatTranscript(session_id=uuid4().hex, topic=topic, owner_id=owner_id)
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            while len(self._sessions) >= self._max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("chat_registry: evicted id=%s reason=capacity", evicted_id)
            self._sessions[transcript.session_id] = (transcript, now)
        return transcript

    def get(self, session_id: str) -> ChatTranscript | None:
        with self._lock:
            now = self._clock()
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            transcript, last_seen = entry
            if now - last_seen > self._idle_ttl_seconds:
                del self._sessions[session_id]
                logger.info("chat_registry: evicted id=%s reason=idle", session_id)
                return None
            self._sessions[session_id] = (transcript, now)
            self._sessions.move_to_end(session_id)
            return transcript

    def close(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def _evict_idle(self, now: float) -> None:
        # Entries are ordered by last use, so the idle ones sit at the front.
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if now - last_seen <= self._idle_ttl_seconds:
                break
            del self._sessions[session_id]
            logger.info("chat_registry: evicted id=%s reason=idle", session_id)
