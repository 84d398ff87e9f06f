from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from betterlife.domain.entities.plan import OneTimeService, PricingPlan
from betterlife.domain.exceptions import PlanNotFoundError


PRICING_PLANS: Mapping[str, PricingPlan] = MappingProxyType(
    {
        "basic": PricingPlan(
            id="basic",
            name="Basic Plan",
            price=999,
            currency="KES",
            interval="month",
            features=(
                "Basic nutrition tracking",
                "Workout logging",
                "Hydration monitoring",
                "Basic AI assistance",
                "Community access",
            ),
        ),
        "premium": PricingPlan(
            id="premium",
            name="Premium Plan",
            price=2999,
            currency="KES",
            interval="month",
            features=(
                "Everything in Basic",
                "Advanced AI nutrition advice",
                "Mental health AI support",
                "Progress analytics",
                "Priority support",
                "2 expert consultations/month",
            ),
        ),
        "pro": PricingPlan(
            id="pro",
            name="Pro Plan",
            price=4999,
            currency="KES",
            interval="month",
            features=(
                "Everything in Premium",
                "Unlimited expert consultations",
                "Personalized meal plans",
                "Custom workout programs",
                "Advanced analytics",
                "White-label features",
            ),
        ),
    }
)


ONE_TIME_SERVICES: Mapping[str, OneTimeService] = MappingProxyType(
    {
        "expert-consultation": OneTimeService(
            id="expert-consultation",
            name="Expert Consultation",
            price=1500,
            currency="KES",
            description="One-on-one consultation with certified nutrition or mental health expert",
        ),
        "meal-plan": OneTimeService(
            id="meal-plan",
            name="Personalized Meal Plan",
            price=2500,
            currency="KES",
            description="Custom 30-day meal plan designed for your goals and preferences",
        ),
        "workout-program": OneTimeService(
            id="workout-program",
            name="Custom Workout Program",
            price=2000,
            currency="KES",
            description="Personalized 12-week workout program designed by fitness experts",
        ),
    }
)


def list_plans() -> list[PricingPlan]:
    return sorted(PRICING_PLANS.values(), key=lambda plan: plan.price)


def list_services() -> list[OneTimeService]:
    return list(ONE_TIME_SERVICES.values())


def get_plan(plan_id: str) -> PricingPlan:
    plan = PRICING_PLANS.get(plan_id.strip().lower())
    if plan is None:
        raise PlanNotFoundError(f"Unknown plan: {plan_id}")
    return plan


def get_service(service_id: str) -> OneTimeService | None:
    return ONE_TIME_SERVICES.get(service_id.strip().lower())
