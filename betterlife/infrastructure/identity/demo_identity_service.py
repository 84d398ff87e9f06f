from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from betterlife.application.dto.auth import AuthData, AuthResult, AuthSession
from betterlife.application.ports.identity_port import IdentityPort
from betterlife.application.ports.key_value_store_port import KeyValueStorePort
from betterlife.application.ports.password_hasher_port import PasswordHasherPort
from betterlife.application.ports.token_port import TokenPort
from betterlife.domain.entities.user import AuthUser

from .user_codec import dump_user, load_user


logger = logging.getLogger(__name__)


SESSION_PREFIX = "demo-user:"
CREDENTIALS_PREFIX = "demo-credentials:"
USER_COUNTER_KEY = "demo-user-counter"


class DemoIdentityService(IdentityPort):
    """Identity backed by an injected key-value store, for running without an auth backend."""

    def __init__(
        self,
        *,
        store: KeyValueStorePort,
        password_hasher: PasswordHasherPort,
        token_service: TokenPort,
    ):
        self._store = store
        self._password_hasher = password_hasher
        self._token_service = token_service

    def sign_up(self, email: str, password: str, profile_fields: dict) -> AuthResult:
        if self._store.get(CREDENTIALS_PREFIX + email) is not None:
            return AuthResult.failed("Email already registered")

        user = AuthUser(
            id=f"mock-user-{self._next_user_number()}",
            email=email,
            user_metadata=dict(profile_fields),
            created_at=datetime.now(timezone.utc),
        )
        self._store.set(
            CREDENTIALS_PREFIX + email,
            json.dumps(
                {
                    "user": dump_user(user),
                    "password_hash": self._password_hasher.hash(password),
                }
            ),
        )
        logger.info("demo_identity: signed_up user=%s", user.id)
        return AuthResult.ok(self._start_session(user))

    def sign_in(self, email: str, password: str) -> AuthResult:
        raw = self._store.get(CREDENTIALS_PREFIX + email)
        if raw is None:
            return AuthResult.failed("Invalid email or password")
        record = json.loads(raw)
        if not self._password_hasher.verify(password, record["password_hash"]):
            return AuthResult.failed("Invalid email or password")
        return AuthResult.ok(self._start_session(load_user(record["user"])))

    def sign_out(self, user_id: str) -> AuthResult:
        self._store.remove(SESSION_PREFIX + user_id)
        logger.info("demo_identity: signed_out user=%s", user_id)
        return AuthResult.ok()

    def current_user(self, user_id: str) -> AuthUser | None:
        raw = self._store.get(SESSION_PREFIX + user_id)
        if raw is None:
            return None
        return load_user(raw)

    def _start_session(self, user: AuthUser) -> AuthData:
        token, expires_at = self._token_service.create_access_token(
            user=user,
            now=datetime.now(timezone.utc),
        )
        self._store.set(SESSION_PREFIX + user.id, dump_user(user))
        return AuthData(user=user, session=AuthSession(access_token=token, expires_at=expires_at, user=user))

    def _next_user_number(self) -> int:
        current = int(self._store.get(USER_COUNTER_KEY) or "0") + 1
        self._store.set(USER_COUNTER_KEY, str(current))
        return current
