from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from storefront.schemas import CamelModel
from storefront.schemas.plan import PlanOut


class SubscriptionOut(CamelModel):
    id: uuid.UUID
    seller_id: uuid.UUID
    plan_id: uuid.UUID
    start_date: datetime
    end_date: datetime
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentOut(CamelModel):
    id: uuid.UUID
    subscription_id: uuid.UUID
    seller_id: uuid.UUID
    amount: int
    status: str
    receipt_info: Optional[dict[str, Any]] = None
    notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    created_at: Optional[datetime] = None


class SubscriptionDetailOut(SubscriptionOut):
    plan: PlanOut
    payments: list[PaymentOut] = []


class SubscribeRequest(CamelModel):
    plan_id: Optional[uuid.UUID] = None
    receipt_info: Any = None


class SubscribeResponse(CamelModel):
    success: bool = True
    subscription: SubscriptionOut
    payment: PaymentOut


class ReviewRequest(CamelModel):
    status: Optional[str] = None
    notes: Optional[str] = None


class ReviewResponse(CamelModel):
    success: bool = True
    payment: PaymentOut


class SubscriptionSummary(CamelModel):
    id: uuid.UUID
    plan_id: uuid.UUID
    end_date: datetime
    status: Optional[str] = None


class SubscriptionStatusOut(CamelModel):
    has_active_subscription: bool
    has_pending_subscription: bool
    pending_payment_status: Optional[str] = None
    subscription: Optional[SubscriptionSummary] = None
    pending_subscription: Optional[SubscriptionSummary] = None


class AdminSubscriptionCreate(CamelModel):
    seller_id: Optional[uuid.UUID] = None
    plan_id: Optional[uuid.UUID] = None
    duration_months: Optional[int] = None
    is_active: Optional[bool] = None


class AdminSubscriptionUpdate(CamelModel):
    plan_id: Optional[uuid.UUID] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
