from __future__ import annotations

from fastapi import APIRouter, Depends

from betterlife.api.deps import get_get_advice_use_case, get_optional_profile
from betterlife.api.schemas.advice import AdviceRequest, AdviceResponse
from betterlife.application.use_cases.get_advice import GetAdviceUseCase
from betterlife.domain.entities.user import UserProfile


router = APIRouter()


@router.post("/v1/advice", response_model=AdviceResponse)
def get_advice(
    req: AdviceRequest,
    profile: UserProfile | None = Depends(get_optional_profile),
    use_case: GetAdviceUseCase = Depends(get_get_advice_use_case),
):
    text = use_case.execute(topic=req.topic, query=req.query, profile=profile)
    return AdviceResponse(topic=req.topic, text=text)
