from __future__ import annotations

from typing import Protocol

from betterlife.application.dto.auth import AuthResult
from betterlife.domain.entities.user import AuthUser


class IdentityPort(Protocol):
    def sign_up(self, email: str, password: str, profile_fields: dict) -> AuthResult:
        ...

    def sign_in(self, email: str, password: str) -> AuthResult:
        ...

    def sign_out(self, user_id: str) -> AuthResult:
        ...

    def current_user(self, user_id: str) -> AuthUser | None:
        """Return the signed-in user, or None once that user's session has ended."""
        ...
