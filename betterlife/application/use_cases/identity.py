from __future__ import annotations

import logging

from betterlife.application.dto.auth import AuthResult
from betterlife.application.ports.identity_port import IdentityPort


logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class SignUpUseCase:
    def __init__(self, *, identity_port: IdentityPort):
        self._identity = identity_port

    def execute(self, *, email: str, password: str, profile_fields: dict | None = None) -> AuthResult:
        email = normalize_email(email)
        if not email or not password:
            return AuthResult.failed("Email and password are required.")
        fields = {key: value for key, value in (profile_fields or {}).items() if value is not None}
        result = self._identity.sign_up(email, password, fields)
        if result.error is not None:
            logger.info("identity: sign_up_rejected email=%s reason=%s", email, result.error.message)
        return result


class SignInUseCase:
    def __init__(self, *, identity_port: IdentityPort):
        self._identity = identity_port

    def execute(self, *, email: str, password: str) -> AuthResult:
        email = normalize_email(email)
        if not email or not password:
            return AuthResult.failed("Invalid email or password")
        result = self._identity.sign_in(email, password)
        if result.error is not None:
            logger.info("identity: sign_in_rejected email=%s", email)
        return result


class SignOutUseCase:
    def __init__(self, *, identity_port: IdentityPort):
        self._identity = identity_port

    def execute(self, *, user_id: str) -> AuthResult:
        return self._identity.sign_out(user_id)
