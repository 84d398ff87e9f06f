from __future__ import annotations

from fastapi import APIRouter

from betterlife.api.schemas.catalog import OneTimeServiceResponse, PricingPlanResponse
from betterlife.domain.services.catalog import list_plans, list_services


router = APIRouter()


@router.get("/v1/catalog/plans", response_model=list[PricingPlanResponse])
def get_plans():
    return [
        PricingPlanResponse(
            id=plan.id,
            name=plan.name,
            price=plan.price,
            currency=plan.currency,
            interval=plan.interval,
            features=list(plan.features),
        )
        for plan in list_plans()
    ]


@router.get("/v1/catalog/services", response_model=list[OneTimeServiceResponse])
def get_services():
    return [
        OneTimeServiceResponse(
            id=service.id,
            name=service.name,
            price=service.price,
            currency=service.currency,
            description=service.description,
        )
        for service in list_services()
    ]
