from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


SUPABASE_PLACEHOLDER_URL = "https://placeholder.supabase.co"
SUPABASE_PLACEHOLDER_KEY = "placeholder-key"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_origin: str
    cors_allow_origins: tuple[str, ...]
    payment_provider: str
    stripe_secret_key: str
    demo_provider_delay_seconds: float
    demo_checkout_base: str
    hf_api_url: str
    hf_api_key: str
    hf_timeout_seconds: float
    supabase_url: str
    supabase_anon_key: str
    jwt_secret: str
    jwt_access_ttl_minutes: int
    demo_store_path: str
    chat_session_ttl_seconds: float
    chat_max_sessions: int
    pending_transaction_ttl_hours: float

    @property
    def has_remote_auth(self) -> bool:
        return (
            bool(self.supabase_url)
            and bool(self.supabase_anon_key)
            and self.supabase_url != SUPABASE_PLACEHOLDER_URL
            and self.supabase_anon_key != SUPABASE_PLACEHOLDER_KEY
        )


def get_settings() -> Settings:
    return Settings(
        app_origin=(_env("APP_ORIGIN", "http://localhost:5173") or "").rstrip("/"),
        cors_allow_origins=_csv("CORS_ALLOW_ORIGINS", "*"),
        payment_provider=(_env("PAYMENT_PROVIDER", "demo") or "demo").strip().lower(),
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        demo_provider_delay_seconds=float(_env("DEMO_PROVIDER_DELAY_SECONDS", "1.0")),
        demo_checkout_base=_env("DEMO_CHECKOUT_BASE", "https://checkout.demo.betterlife.local"),
        hf_api_url=_env(
            "HF_API_URL",
            "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium",
        ),
        hf_api_key=_env("HF_API_KEY", ""),
        hf_timeout_seconds=float(_env("HF_TIMEOUT_SECONDS", "15")),
        supabase_url=_env("SUPABASE_URL", SUPABASE_PLACEHOLDER_URL),
        supabase_anon_key=_env("SUPABASE_ANON_KEY", SUPABASE_PLACEHOLDER_KEY),
        jwt_secret=_env("JWT_SECRET", "dev-secret-change-me-before-deploying"),
        jwt_access_ttl_minutes=int(_env("JWT_ACCESS_TTL_MINUTES", "60")),
        demo_store_path=_env("DEMO_STORE_PATH", ""),
        chat_session_ttl_seconds=float(_env("CHAT_SESSION_TTL_SECONDS", "1800")),
        chat_max_sessions=int(_env("CHAT_MAX_SESSIONS", "1000")),
        pending_transaction_ttl_hours=float(_env("PENDING_TRANSACTION_TTL_HOURS", "24")),
    )
