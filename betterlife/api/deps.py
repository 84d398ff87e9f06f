from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from betterlife.application.ports.identity_port import IdentityPort
from betterlife.application.ports.key_value_store_port import KeyValueStorePort
from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.application.use_cases.cancel_subscription import CancelSubscriptionUseCase
from betterlife.application.use_cases.chat_sessions import (
    CloseChatSessionUseCase,
    GetChatSessionUseCase,
    OpenChatSessionUseCase,
    SendChatMessageUseCase,
)
from betterlife.application.use_cases.create_payment import CreatePaymentUseCase
from betterlife.application.use_cases.create_subscription import CreateSubscriptionUseCase
from betterlife.application.use_cases.get_advice import GetAdviceUseCase
from betterlife.application.use_cases.get_payment_status import GetPaymentStatusUseCase
from betterlife.application.use_cases.get_subscription_status import GetSubscriptionStatusUseCase
from betterlife.application.use_cases.identity import SignInUseCase, SignOutUseCase, SignUpUseCase
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.services.profile import build_profile
from betterlife.infrastructure.clients.hf_inference_client import (
    HuggingFaceInferenceClient,
    HuggingFaceInferenceSettings,
)
from betterlife.infrastructure.security.token_service import JwtTokenService
from betterlife.infrastructure.storage.chat_session_registry import InMemoryChatSessionRegistry
from betterlife.infrastructure.storage.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from betterlife.infrastructure.storage.pending_transaction_store import (
    KeyValuePendingTransactionStore,
)
from betterlife.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_store() -> KeyValueStorePort:
    settings = get_settings()
    if settings.demo_store_path:
        return JsonFileKeyValueStore(settings.demo_store_path)
    return InMemoryKeyValueStore()


@lru_cache(maxsize=1)
def _get_payment_provider() -> PaymentProviderPort:
    settings = get_settings()
    if settings.payment_provider == "stripe":
        from betterlife.infrastructure.clients.stripe_payment_provider import StripePaymentProvider

        if not settings.stripe_secret_key:
            raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY is required.")
        return StripePaymentProvider(secret_key=settings.stripe_secret_key)
    if settings.payment_provider != "demo":
        raise HTTPException(
            status_code=500,
            detail=f"Unsupported PAYMENT_PROVIDER: {settings.payment_provider}",
        )

    from betterlife.infrastructure.clients.demo_payment_provider import DemoPaymentProvider

    return DemoPaymentProvider(
        checkout_base=settings.demo_checkout_base,
        delay_seconds=settings.demo_provider_delay_seconds,
    )


def _get_pending_transactions() -> KeyValuePendingTransactionStore:
    return KeyValuePendingTransactionStore(
        _get_store(),
        ttl=timedelta(hours=get_settings().pending_transaction_ttl_hours),
    )


@lru_cache(maxsize=1)
def _get_inference_client() -> HuggingFaceInferenceClient:
    settings = get_settings()
    return HuggingFaceInferenceClient(
        HuggingFaceInferenceSettings(
            api_url=settings.hf_api_url,
            api_key=settings.hf_api_key,
            timeout_seconds=settings.hf_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_chat_registry() -> InMemoryChatSessionRegistry:
    settings = get_settings()
    return InMemoryChatSessionRegistry(
        idle_ttl_seconds=settings.chat_session_ttl_seconds,
        max_sessions=settings.chat_max_sessions,
    )


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(
        jwt_secret=settings.jwt_secret,
        access_ttl_minutes=settings.jwt_access_ttl_minutes,
    )


@lru_cache(maxsize=1)
def _get_identity_port() -> IdentityPort:
    settings = get_settings()
    if settings.has_remote_auth:
        from betterlife.infrastructure.clients.supabase_auth_client import SupabaseIdentityService

        return SupabaseIdentityService(
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            token_service=_get_token_service(),
            store=_get_store(),
        )

    from betterlife.infrastructure.identity.demo_identity_service import DemoIdentityService
    from betterlife.infrastructure.security.password_hasher import PasswordHasher

    return DemoIdentityService(
        store=_get_store(),
        password_hasher=PasswordHasher(),
        token_service=_get_token_service(),
    )


def get_create_payment_use_case() -> CreatePaymentUseCase:
    return CreatePaymentUseCase(
        provider=_get_payment_provider(),
        pending_transactions=_get_pending_transactions(),
    )


def get_create_subscription_use_case() -> CreateSubscriptionUseCase:
    return CreateSubscriptionUseCase(
        provider=_get_payment_provider(),
        pending_transactions=_get_pending_transactions(),
    )


def get_payment_status_use_case() -> GetPaymentStatusUseCase:
    return GetPaymentStatusUseCase(
        provider=_get_payment_provider(),
        pending_transactions=_get_pending_transactions(),
    )


def get_subscription_status_use_case() -> GetSubscriptionStatusUseCase:
    return GetSubscriptionStatusUseCase(
        provider=_get_payment_provider(),
        pending_transactions=_get_pending_transactions(),
    )


def get_cancel_subscription_use_case() -> CancelSubscriptionUseCase:
    return CancelSubscriptionUseCase(
        provider=_get_payment_provider(),
        pending_transactions=_get_pending_transactions(),
    )


def get_get_advice_use_case() -> GetAdviceUseCase:
    return GetAdviceUseCase(inference_port=_get_inference_client())


def get_open_chat_session_use_case() -> OpenChatSessionUseCase:
    return OpenChatSessionUseCase(sessions=_get_chat_registry())


def get_get_chat_session_use_case() -> GetChatSessionUseCase:
    return GetChatSessionUseCase(sessions=_get_chat_registry())


def get_close_chat_session_use_case() -> CloseChatSessionUseCase:
    return CloseChatSessionUseCase(sessions=_get_chat_registry())


def get_send_chat_message_use_case() -> SendChatMessageUseCase:
    return SendChatMessageUseCase(
        sessions=_get_chat_registry(),
        get_advice_use_case=get_get_advice_use_case(),
    )


def get_identity_port() -> IdentityPort:
    return _get_identity_port()


def get_sign_up_use_case(identity: IdentityPort = Depends(get_identity_port)) -> SignUpUseCase:
    return SignUpUseCase(identity_port=identity)


def get_sign_in_use_case(identity: IdentityPort = Depends(get_identity_port)) -> SignInUseCase:
    return SignInUseCase(identity_port=identity)


def get_sign_out_use_case(identity: IdentityPort = Depends(get_identity_port)) -> SignOutUseCase:
    return SignOutUseCase(identity_port=identity)


def get_request_origin(origin: str | None = Header(default=None)) -> str:
    if origin and origin.startswith(("http://", "https://")):
        return origin.rstrip("/")
    return get_settings().app_origin


def get_optional_profile(
    authorization: str | None = Header(default=None),
    identity: IdentityPort = Depends(get_identity_port),
) -> UserProfile | None:
    if authorization is None:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing access token.")

    try:
        payload = _get_token_service().decode_access_token(token=token)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    # Tokens outlive sign-out; the stored session is the source of truth.
    user = identity.current_user(payload.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Session has ended. Please log in again.")
    return build_profile(user)


def get_current_profile(profile: UserProfile | None = Depends(get_optional_profile)) -> UserProfile:
    if profile is None:
        raise HTTPException(status_code=401, detail="Missing access token.")
    return profile
