from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]
Language = Literal["en", "sw"]


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    full_name: str
    activity_level: ActivityLevel = "moderate"
    goals: tuple[str, ...] = ("fitness", "health")
    language: Language = "en"
    location: str = "Nairobi"
    age: int | None = None
    weight: float | None = None
    height: float | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str
    user_metadata: dict = field(default_factory=dict)
    created_at: datetime | None = None
