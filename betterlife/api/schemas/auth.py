from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)
    full_name: str | None = Field(default=None, max_length=120)
    age: int | None = Field(default=None, ge=0, le=120)
    activity_level: str | None = None
    language: str | None = None
    location: str | None = Field(default=None, max_length=120)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class AuthUserResponse(BaseModel):
    id: str
    email: str
    user_metadata: dict


class AuthSessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class AuthResponse(BaseModel):
    user: AuthUserResponse
    session: AuthSessionResponse | None


class SignOutResponse(BaseModel):
    ok: bool
