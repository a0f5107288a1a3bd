"""
Admin back office routes: plans, subscriptions and payment review.
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_review_service, get_subscription_service, require_admin
from storefront.core.security import Identity
from storefront.database import get_db
from storefront.schemas.plan import PlanOut
from storefront.schemas.subscription import (
    AdminSubscriptionCreate,
    AdminSubscriptionUpdate,
    PaymentOut,
    ReviewRequest,
    ReviewResponse,
    SubscriptionDetailOut,
)
from storefront.services.plan_catalog import list_plans
from storefront.services.review_service import ReviewService
from storefront.services.subscription_service import SubscriptionService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/plans", response_model=list[PlanOut])
async def admin_list_plans(db: Session = Depends(get_db)) -> list[PlanOut]:
    return [PlanOut.model_validate(p) for p in list_plans(db)]


@router.get("/subscriptions", response_model=list[SubscriptionDetailOut])
async def admin_list_subscriptions(
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[SubscriptionDetailOut]:
    return [SubscriptionDetailOut.model_validate(s) for s in service.list_subscriptions()]


@router.post(
    "/subscriptions",
    response_model=SubscriptionDetailOut,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_subscription(
    payload: AdminSubscriptionCreate,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionDetailOut:
    subscription = service.grant_subscription(
        payload.seller_id,
        payload.plan_id,
        payload.duration_months,
        payload.is_active,
    )
    return SubscriptionDetailOut.model_validate(subscription)


@router.get("/subscriptions/{subscription_id}", response_model=SubscriptionDetailOut)
async def admin_get_subscription(
    subscription_id: uuid.UUID,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionDetailOut:
    return SubscriptionDetailOut.model_validate(service.get_subscription(subscription_id))


@router.patch("/subscriptions/{subscription_id}", response_model=SubscriptionDetailOut)
async def admin_update_subscription(
    subscription_id: uuid.UUID,
    payload: AdminSubscriptionUpdate,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionDetailOut:
    subscription = service.update_subscription(
        subscription_id,
        plan_id=payload.plan_id,
        end_date=payload.end_date,
        is_active=payload.is_active,
    )
    return SubscriptionDetailOut.model_validate(subscription)


@router.post("/subscriptions/{payment_id}/review", response_model=ReviewResponse)
async def review_payment(
    payment_id: uuid.UUID,
    payload: ReviewRequest,
    admin: Identity = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    """
    Approve or reject a pending plan payment. Approval activates its subscription.
    """
    payment = service.review_payment(
        payment_id,
        payload.status,
        reviewer=admin.reviewer_label,
        notes=payload.notes,
    )
    return ReviewResponse(payment=PaymentOut.model_validate(payment))


@router.get("/payments", response_model=list[PaymentOut])
async def admin_list_payments(
    status: Optional[str] = None,
    service: ReviewService = Depends(get_review_service),
) -> list[PaymentOut]:
    return [PaymentOut.model_validate(p) for p in service.list_payments(status)]
