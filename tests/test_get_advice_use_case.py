from __future__ import annotations

import logging

import httpx
import pytest

from betterlife.application.use_cases.get_advice import GetAdviceUseCase
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.exceptions import InferenceError
from betterlife.domain.services.advice_fallback import fallback_response
from betterlife.infrastructure.clients.hf_inference_client import (
    HuggingFaceInferenceClient,
    HuggingFaceInferenceSettings,
)


PROFILE = UserProfile(id="mock-user-1", email="wanjiru@example.com", full_name="Wanjiru")


class FakeInferencePort:
    def __init__(self, *, text: str | None = None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text or ""


def _unreachable_client() -> HuggingFaceInferenceClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return HuggingFaceInferenceClient(
        HuggingFaceInferenceSettings(api_url="https://hf.test/models/x", api_key="k", timeout_seconds=1),
        transport=httpx.MockTransport(handler),
    )


def test_returns_generated_text_when_inference_succeeds():
    port = FakeInferencePort(text="Eat more sukuma wiki.")
    use_case = GetAdviceUseCase(inference_port=port)

    text = use_case.execute(topic="diet", query="what to eat?", profile=PROFILE)

    assert text == "Eat more sukuma wiki."
    assert len(port.prompts) == 1
    assert port.prompts[0].endswith("Consider local foods and cultural preferences.")
    assert "what to eat?" in port.prompts[0]


def test_unreachable_endpoint_falls_back_to_weight_guidance_deterministically():
    use_case = GetAdviceUseCase(inference_port=_unreachable_client())

    first = use_case.execute(topic="diet", query="I want to lose weight", profile=PROFILE)
    second = use_case.execute(topic="diet", query="I want to lose weight", profile=PROFILE)

    assert "weight management" in first
    assert first == second


def test_anxious_before_competition_uses_stress_fallback():
    use_case = GetAdviceUseCase(
        inference_port=FakeInferencePort(error=InferenceError("boom", cause="http_status"))
    )

    text = use_case.execute(
        topic="mental_health",
        query="I feel very anxious before competition",
        profile=PROFILE,
    )

    assert text == fallback_response("mental_health", "stress")


def test_fallback_logs_the_failure_cause(caplog: pytest.LogCaptureFixture):
    use_case = GetAdviceUseCase(
        inference_port=FakeInferencePort(error=InferenceError("took too long", cause="timeout"))
    )

    with caplog.at_level(logging.WARNING, logger="betterlife.application.use_cases.get_advice"):
        use_case.execute(topic="diet", query="water intake", profile=None)

    assert "cause=timeout" in caplog.text


def test_adapter_breaking_contract_still_falls_back(caplog: pytest.LogCaptureFixture):
    use_case = GetAdviceUseCase(inference_port=FakeInferencePort(error=KeyError("generated_text")))

    with caplog.at_level(logging.WARNING, logger="betterlife.application.use_cases.get_advice"):
        text = use_case.execute(topic="mental_health", query="feeling stressed", profile=PROFILE)

    assert text == fallback_response("mental_health", "stress")
    assert "cause=unexpected" in caplog.text


def test_blank_generated_text_falls_back():
    use_case = GetAdviceUseCase(inference_port=FakeInferencePort(text="   "))

    text = use_case.execute(topic="diet", query="need more energy", profile=PROFILE)

    assert text == fallback_response("diet", "energy")


def test_unknown_topic_is_rejected():
    use_case = GetAdviceUseCase(inference_port=FakeInferencePort(text="x"))

    with pytest.raises(ValueError):
        use_case.execute(topic="finance", query="hi", profile=PROFILE)  # type: ignore[arg-type]
