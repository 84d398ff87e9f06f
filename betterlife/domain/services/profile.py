from __future__ import annotations

from datetime import datetime

from betterlife.domain.entities.user import AuthUser, UserProfile


ACTIVITY_LEVELS = {"sedentary", "light", "moderate", "active", "very_active"}


def build_profile(user: AuthUser) -> UserProfile:
    """Fill a profile from sign-up metadata, using demo defaults for gaps."""
    metadata = user.user_metadata or {}
    activity_level = metadata.get("activity_level") or "moderate"
    if activity_level not in ACTIVITY_LEVELS:
        activity_level = "moderate"
    language = metadata.get("language") if metadata.get("language") in {"en", "sw"} else "en"
    return UserProfile(
        id=user.id,
        email=user.email or "",
        full_name=metadata.get("full_name") or "Demo User",
        age=_int_or(metadata.get("age"), 25),
        weight=70,
        height=175,
        activity_level=activity_level,
        goals=("fitness", "health"),
        language=language,
        location=metadata.get("location") or "Nairobi",
        created_at=user.created_at or datetime.now().astimezone(),
    )


def _int_or(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
