from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import httpx

from betterlife.application.dto.auth import AuthData, AuthResult, AuthSession
from betterlife.application.ports.identity_port import IdentityPort
from betterlife.application.ports.key_value_store_port import KeyValueStorePort
from betterlife.application.ports.token_port import TokenPort
from betterlife.domain.entities.user import AuthUser
from betterlife.infrastructure.identity.user_codec import dump_user, load_user


logger = logging.getLogger(__name__)


NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."
SESSION_PREFIX = "supabase-session:"


class SupabaseIdentityService(IdentityPort):
    """Identity delegated to the Supabase GoTrue REST API."""

    def __init__(
        self,
        *,
        url: str,
        anon_key: str,
        token_service: TokenPort,
        store: KeyValueStorePort,
        timeout_seconds: float = 10,
        transport: httpx.BaseTransport | None = None,
    ):
        self._base = url.rstrip("/") + "/auth/v1"
        self._anon_key = anon_key
        self._token_service = token_service
        self._store = store
        self._timeout = timeout_seconds
        self._transport = transport

    def sign_up(self, email: str, password: str, profile_fields: dict) -> AuthResult:
        try:
            response = self._post(
                "/signup",
                body={"email": email, "password": password, "data": profile_fields},
            )
        except httpx.HTTPError as exc:
            logger.warning("supabase_auth: sign_up_network_error error=%s", exc)
            return AuthResult.failed(NETWORK_ERROR_MESSAGE)
        return self._to_result(response)

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            response = self._post(
                "/token",
                params={"grant_type": "password"},
                body={"email": email, "password": password},
            )
        except httpx.HTTPError as exc:
            logger.warning("supabase_auth: sign_in_network_error error=%s", exc)
            return AuthResult.failed(NETWORK_ERROR_MESSAGE)
        return self._to_result(response)

    def sign_out(self, user_id: str) -> AuthResult:
        key = SESSION_PREFIX + user_id
        raw = self._store.get(key)
        self._store.remove(key)
        if raw is None:
            return AuthResult.ok()
        remote_token = json.loads(raw).get("remote_access_token")
        if remote_token:
            try:
                self._post("/logout", headers={"Authorization": f"Bearer {remote_token}"})
            except httpx.HTTPError as exc:
                logger.warning("supabase_auth: sign_out_network_error error=%s", exc)
        return AuthResult.ok()

    def current_user(self, user_id: str) -> AuthUser | None:
        raw = self._store.get(SESSION_PREFIX + user_id)
        if raw is None:
            return None
        return load_user(json.loads(raw)["user"])

    def _post(
        self,
        path: str,
        *,
        body: dict | None = None,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        request_headers = {"apikey": self._anon_key, "Content-Type": "application/json"}
        request_headers.update(headers or {})
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            return client.post(self._base + path, json=body, params=params, headers=request_headers)

    def _to_result(self, response: httpx.Response) -> AuthResult:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        if response.is_error:
            message = (
                payload.get("error_description")
                or payload.get("msg")
                or payload.get("message")
                or f"Authentication failed ({response.status_code})."
            )
            return AuthResult.failed(str(message))

        raw_user = payload.get("user") if isinstance(payload.get("user"), dict) else payload
        if not raw_user.get("id"):
            return AuthResult.failed("Authentication response is incomplete.")

        user = AuthUser(
            id=str(raw_user["id"]),
            email=str(raw_user.get("email") or ""),
            user_metadata=raw_user.get("user_metadata") or {},
            created_at=_parse_timestamp(raw_user.get("created_at")),
        )
        remote_token = payload.get("access_token")
        if not remote_token:
            # Sign-up pending email confirmation: no session yet.
            return AuthResult.ok(AuthData(user=user, session=None))

        token, expires_at = self._token_service.create_access_token(user=user, now=datetime.now(timezone.utc))
        self._store.set(
            SESSION_PREFIX + user.id,
            json.dumps({"user": dump_user(user), "remote_access_token": remote_token}),
        )
        return AuthResult.ok(
            AuthData(user=user, session=AuthSession(access_token=token, expires_at=expires_at, user=user))
        )


def _parse_timestamp(value) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
