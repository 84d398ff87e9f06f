from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from betterlife.api.deps import (
    get_current_profile,
    get_sign_in_use_case,
    get_sign_out_use_case,
    get_sign_up_use_case,
)
from betterlife.api.schemas.auth import (
    AuthResponse,
    AuthSessionResponse,
    AuthUserResponse,
    SignInRequest,
    SignOutResponse,
    SignUpRequest,
)
from betterlife.application.dto.auth import AuthResult
from betterlife.application.use_cases.identity import SignInUseCase, SignOutUseCase, SignUpUseCase
from betterlife.domain.entities.user import UserProfile


router = APIRouter()


def _auth_response(result: AuthResult, *, error_status: int) -> AuthResponse:
    if result.error is not None or result.data is None:
        detail = result.error.message if result.error is not None else "Authentication failed."
        raise HTTPException(status_code=error_status, detail=detail)

    data = result.data
    session = None
    if data.session is not None:
        session = AuthSessionResponse(
            access_token=data.session.access_token,
            expires_at=data.session.expires_at,
        )
    return AuthResponse(
        user=AuthUserResponse(
            id=data.user.id,
            email=data.user.email,
            user_metadata=data.user.user_metadata,
        ),
        session=session,
    )


@router.post("/v1/auth/signup", response_model=AuthResponse)
def sign_up(
    req: SignUpRequest,
    use_case: SignUpUseCase = Depends(get_sign_up_use_case),
):
    result = use_case.execute(
        email=req.email,
        password=req.password,
        profile_fields=req.model_dump(exclude={"email", "password"}, exclude_none=True),
    )
    return _auth_response(result, error_status=400)


@router.post("/v1/auth/signin", response_model=AuthResponse)
def sign_in(
    req: SignInRequest,
    use_case: SignInUseCase = Depends(get_sign_in_use_case),
):
    result = use_case.execute(email=req.email, password=req.password)
    return _auth_response(result, error_status=401)


@router.post("/v1/auth/signout", response_model=SignOutResponse)
def sign_out(
    profile: UserProfile = Depends(get_current_profile),
    use_case: SignOutUseCase = Depends(get_sign_out_use_case),
):
    result = use_case.execute(user_id=profile.id)
    return SignOutResponse(ok=result.error is None)
