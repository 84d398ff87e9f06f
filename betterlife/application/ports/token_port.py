from __future__ import annotations

from datetime import datetime
from typing import Protocol

from betterlife.application.dto.auth import AccessTokenPayload
from betterlife.domain.entities.user import AuthUser


class TokenPort(Protocol):
    def create_access_token(self, *, user: AuthUser, now: datetime) -> tuple[str, datetime]:
        ...

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        ...
