from __future__ import annotations

from typing import Protocol


class InferencePort(Protocol):
    def generate(self, prompt: str) -> str:
        """Return generated text or raise ``InferenceError``."""
        ...
