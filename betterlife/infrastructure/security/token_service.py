from __future__ import annotations

from datetime import datetime, timedelta

import jwt

from betterlife.application.dto.auth import AccessTokenPayload
from betterlife.application.ports.token_port import TokenPort
from betterlife.domain.entities.user import AuthUser


class JwtTokenService(TokenPort):
    def __init__(self, *, jwt_secret: str, access_ttl_minutes: int):
        self._jwt_secret = jwt_secret
        self._access_ttl_minutes = access_ttl_minutes

    def create_access_token(self, *, user: AuthUser, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(minutes=self._access_ttl_minutes)
        payload = {
            "sub": user.id,
            "email": user.email,
            "user_metadata": dict(user.user_metadata or {}),
            "type": "access",
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        if user.created_at is not None:
            payload["created_at"] = user.created_at.isoformat()
        token = jwt.encode(payload, self._jwt_secret, algorithm="HS256")
        return token, exp

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        try:
            payload = jwt.decode(token, self._jwt_secret, algorithms=["HS256"])
        except jwt.PyJWTError as exc:
            raise ValueError("Invalid access token.") from exc

        if payload.get("type") != "access":
            raise ValueError("Invalid token type.")

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise ValueError("Invalid token subject.")

        metadata = payload.get("user_metadata")
        return AccessTokenPayload(
            user_id=user_id,
            email=str(payload.get("email") or ""),
            user_metadata=metadata if isinstance(metadata, dict) else {},
        )
