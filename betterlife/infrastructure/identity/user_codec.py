from __future__ import annotations

import json
from datetime import datetime

from betterlife.domain.entities.user import AuthUser


def dump_user(user: AuthUser) -> str:
    return json.dumps(
        {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata,
            "created_at": user.created_at.isoformat() if user.created_at else None,
        }
    )


def load_user(raw: str) -> AuthUser:
    data = json.loads(raw)
    created_at = data.get("created_at")
    return AuthUser(
        id=str(data["id"]),
        email=str(data.get("email") or ""),
        user_metadata=data.get("user_metadata") or {},
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )
