from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from betterlife.application.ports.inference_port import InferencePort
from betterlife.domain.exceptions import InferenceError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HuggingFaceInferenceSettings:
    api_url: str
    api_key: str
    timeout_seconds: float


class HuggingFaceInferenceClient(InferencePort):
    """Single-shot text generation against the Hugging Face inference API."""

    def __init__(
        self,
        settings: HuggingFaceInferenceSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    def generate(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self._settings.api_key:
            headers["Authorization"] = f"Bearer {self._settings.api_key}"

        try:
            with httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport) as client:
                response = client.post(self._settings.api_url, json={"inputs": prompt}, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as exc:
            raise InferenceError(f"Inference request timed out: {exc}", cause="timeout") from exc
        except httpx.HTTPStatusError as exc:
            raise InferenceError(
                f"Inference endpoint returned {exc.response.status_code}",
                cause="http_status",
            ) from exc
        except httpx.HTTPError as exc:
            raise InferenceError(f"Inference request failed: {exc}", cause="network") from exc
        except ValueError as exc:
            raise InferenceError("Inference response is not valid JSON.", cause="malformed") from exc

        text = _generated_text(payload)
        if text is None:
            raise InferenceError("Inference response has no generated_text.", cause="malformed")
        logger.debug("hf_inference_client: generated chars=%s", len(text))
        return text


def _generated_text(payload) -> str | None:
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    text = first.get("generated_text")
    if not isinstance(text, str) or not text.strip():
        return None
    return text
