"""
Plan catalog and plan purchase routes.
"""
from __future__ import annotations

import uuid
from typing import Optional, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_seller_id, get_subscription_service
from storefront.database import get_db
from storefront.schemas.plan import PlanListResponse, PlanOut, PlanResponse
from storefront.schemas.subscription import (
    PaymentOut,
    SubscribeRequest,
    SubscribeResponse,
    SubscriptionOut,
)
from storefront.services.plan_catalog import get_plan, list_plans
from storefront.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("", response_model=Union[PlanResponse, PlanListResponse])
async def get_plans(
    id: Optional[uuid.UUID] = None,
    db: Session = Depends(get_db),
) -> Union[PlanResponse, PlanListResponse]:
    """
    List all plans cheapest first, or fetch one plan when ``id`` is given.
    """
    if id is not None:
        return PlanResponse(plan=PlanOut.model_validate(get_plan(db, id)))
    return PlanListResponse(plans=[PlanOut.model_validate(p) for p in list_plans(db)])


@router.post("/subscribe", response_model=SubscribeResponse, status_code=status.HTTP_201_CREATED)
async def subscribe(
    payload: SubscribeRequest,
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscribeResponse:
    subscription, payment = service.submit_plan_purchase(
        seller_id, payload.plan_id, payload.receipt_info
    )
    return SubscribeResponse(
        subscription=SubscriptionOut.model_validate(subscription),
        payment=PaymentOut.model_validate(payment),
    )
