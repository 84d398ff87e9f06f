from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from betterlife.domain.entities.user import AuthUser


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    expires_at: datetime
    user: AuthUser


@dataclass(frozen=True)
class AuthData:
    user: AuthUser
    session: AuthSession | None


@dataclass(frozen=True)
class AuthError:
    message: str


@dataclass(frozen=True)
class AuthResult:
    data: AuthData | None
    error: AuthError | None

    @classmethod
    def ok(cls, data: AuthData | None = None) -> AuthResult:
        return cls(data=data, error=None)

    @classmethod
    def failed(cls, message: str) -> AuthResult:
        return cls(data=None, error=AuthError(message=message))


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str
    email: str
    user_metadata: dict
