from __future__ import annotations

import logging

from betterlife.application.ports.inference_port import InferencePort
from betterlife.domain.entities.chat import CHAT_TOPICS, ChatTopic
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.exceptions import InferenceError
from betterlife.domain.services.advice_fallback import (
    build_prompt,
    fallback_response,
    match_keyword_group,
)


logger = logging.getLogger(__name__)


class GetAdviceUseCase:
    """Ask the inference endpoint and degrade to the rule-based responder.

    Always returns a non-empty string; inference failures are logged with
    their cause and never reach the caller.
    """

    def __init__(self, *, inference_port: InferencePort):
        self._inference = inference_port

    def execute(self, *, topic: ChatTopic, query: str, profile: UserProfile | None) -> str:
        if topic not in CHAT_TOPICS:
            raise ValueError(f"Unsupported advice topic: {topic}")

        prompt = build_prompt(topic, query)
        try:
            text = self._inference.generate(prompt)
        except InferenceError as exc:
            logger.warning(
                "advice: inference_fallback topic=%s cause=%s group=%s user=%s error=%s",
                topic,
                exc.cause,
                match_keyword_group(topic, query),
                profile.id if profile is not None else None,
                exc,
            )
            return fallback_response(topic, query)
        except Exception as exc:  # noqa: BLE001
            logger.exception("advice: inference_fallback topic=%s cause=unexpected error=%s", topic, exc)
            return fallback_response(topic, query)

        text = (text or "").strip()
        if not text:
            logger.warning("advice: inference_fallback topic=%s cause=empty_text", topic)
            return fallback_response(topic, query)
        return text
