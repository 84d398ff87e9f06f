from __future__ import annotations

import json

import httpx
import pytest

from betterlife.domain.exceptions import InferenceError
from betterlife.infrastructure.clients.hf_inference_client import (
    HuggingFaceInferenceClient,
    HuggingFaceInferenceSettings,
)


def _client(handler) -> HuggingFaceInferenceClient:
    return HuggingFaceInferenceClient(
        HuggingFaceInferenceSettings(
            api_url="https://hf.test/models/dialo",
            api_key="hf-token",
            timeout_seconds=5,
        ),
        transport=httpx.MockTransport(handler),
    )


def test_posts_inputs_with_bearer_token_and_reads_generated_text():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"generated_text": "Drink water."}])

    text = _client(handler).generate("prompt text")

    assert text == "Drink water."
    assert seen["auth"] == "Bearer hf-token"
    assert seen["body"] == {"inputs": "prompt text"}


@pytest.mark.parametrize(
    ("handler", "cause"),
    [
        (lambda request: httpx.Response(503, json={"error": "loading"}), "http_status"),
        (lambda request: httpx.Response(200, content=b"<html>"), "malformed"),
        (lambda request: httpx.Response(200, json={"generated_text": "x"}), "malformed"),
        (lambda request: httpx.Response(200, json=[]), "malformed"),
        (lambda request: httpx.Response(200, json=[{"generated_text": 3}]), "malformed"),
    ],
)
def test_unusable_responses_raise_with_cause(handler, cause):
    with pytest.raises(InferenceError) as exc_info:
        _client(handler).generate("p")

    assert exc_info.value.cause == cause


def test_timeout_and_network_errors_are_distinguished():
    def timeout_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    def network_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(InferenceError) as timeout_exc:
        _client(timeout_handler).generate("p")
    with pytest.raises(InferenceError) as network_exc:
        _client(network_handler).generate("p")

    assert timeout_exc.value.cause == "timeout"
    assert network_exc.value.cause == "network"
