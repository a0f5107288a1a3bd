"""
Plan purchase submission and subscription lookups.

A purchase always leaves the seller's subscription inactive until an admin
approves the accompanying payment, including renewals of a running plan.
"""
from __future__ import annotations

import calendar
import json
import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from storefront.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from storefront.core.logger import get_logger
from storefront.models import (
    PAYMENT_PENDING,
    PlanPayment,
    Seller,
    Subscription,
    utc_now,
)
from storefront.services.plan_catalog import get_plan

logger = get_logger(__name__)

DEFAULT_PERIOD_DAYS = 30


def normalize_receipt(receipt: Any) -> dict[str, Any]:
    """
    Coerce submitted receipt info into a JSON object.

    Text is parsed as JSON when possible; anything that does not decode to an
    object is kept as ``{"rawData": <text>}``.
    """
    if isinstance(receipt, dict):
        return receipt
    if isinstance(receipt, str):
        try:
            parsed = json.loads(receipt)
        except ValueError:
            return {"rawData": receipt}
        if isinstance(parsed, dict):
            return parsed
        return {"rawData": receipt}
    raise ValidationError("Invalid receipt info")


def add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def find_current_subscription(db: Session, seller_id: uuid.UUID) -> Optional[Subscription]:
    """Active subscription whose window has not ended yet."""
    return (
        db.query(Subscription)
        .options(joinedload(Subscription.plan))
        .filter(
            Subscription.seller_id == seller_id,
            Subscription.is_active.is_(True),
            Subscription.end_date >= utc_now(),
        )
        .order_by(Subscription.end_date.desc())
        .first()
    )


def deactivate_other_subscriptions(db: Session, seller_id: uuid.UUID, keep_id: uuid.UUID) -> int:
    return (
        db.query(Subscription)
        .filter(
            Subscription.seller_id == seller_id,
            Subscription.id != keep_id,
            Subscription.is_active.is_(True),
        )
        .update({Subscription.is_active: False}, synchronize_session="fetch")
    )


class SubscriptionService:
    def __init__(self, db: Session, period_days: int = DEFAULT_PERIOD_DAYS):
        self.db = db
        self.period_days = period_days

    def submit_plan_purchase(
        self,
        seller_id: uuid.UUID,
        plan_id: Optional[uuid.UUID],
        receipt: Any,
    ) -> tuple[Subscription, PlanPayment]:
        if plan_id is None or receipt is None or receipt == "":
            raise ValidationError("Missing required fields")

        seller = self.db.get(Seller, seller_id)
        if seller is None or not seller.is_active:
            raise UnauthorizedError("Unauthorized")

        plan = get_plan(self.db, plan_id)
        receipt_info = normalize_receipt(receipt)

        start_date = utc_now()
        end_date = start_date + timedelta(days=self.period_days)

        try:
            subscription = (
                self.db.query(Subscription)
                .filter(
                    Subscription.seller_id == seller_id,
                    Subscription.is_active.is_(True),
                )
                .order_by(Subscription.created_at.desc())
                .with_for_update()
                .first()
            )
            if subscription is not None:
                subscription.plan_id = plan.id
                subscription.start_date = start_date
                subscription.end_date = end_date
                subscription.is_active = False
            else:
                subscription = Subscription(
                    seller_id=seller_id,
                    plan_id=plan.id,
                    start_date=start_date,
                    end_date=end_date,
                    is_active=False,
                )
                self.db.add(subscription)
            self.db.flush()

            payment = PlanPayment(
                subscription_id=subscription.id,
                seller_id=seller_id,
                amount=plan.price,
                status=PAYMENT_PENDING,
                receipt_info=receipt_info,
            )
            self.db.add(payment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Plan purchase submitted seller=%s plan=%s subscription=%s payment=%s",
            seller_id,
            plan.id,
            subscription.id,
            payment.id,
        )
        return subscription, payment

    def get_current_subscription(self, seller_id: uuid.UUID) -> Optional[Subscription]:
        return find_current_subscription(self.db, seller_id)

    def get_subscription_status(self, seller_id: uuid.UUID) -> dict[str, Any]:
        active = self.get_current_subscription(seller_id)
        pending = None
        pending_status = None
        if active is None:
            pending = (
                self.db.query(Subscription)
                .options(selectinload(Subscription.payments))
                .filter(
                    Subscription.seller_id == seller_id,
                    Subscription.is_active.is_(False),
                )
                .order_by(Subscription.updated_at.desc())
                .first()
            )
            if pending is not None and pending.payments:
                pending_status = pending.payments[0].status

        return {
            "has_active_subscription": active is not None,
            "has_pending_subscription": pending is not None,
            "pending_payment_status": pending_status,
            "subscription": {
                "id": active.id,
                "plan_id": active.plan_id,
                "end_date": active.end_date,
            }
            if active
            else None,
            "pending_subscription": {
                "id": pending.id,
                "plan_id": pending.plan_id,
                "end_date": pending.end_date,
                "status": pending_status or PAYMENT_PENDING,
            }
            if pending
            else None,
        }

    def list_seller_subscriptions(self, seller_id: uuid.UUID) -> list[Subscription]:
        return (
            self.db.query(Subscription)
            .options(joinedload(Subscription.plan), selectinload(Subscription.payments))
            .filter(Subscription.seller_id == seller_id)
            .order_by(Subscription.created_at.desc())
            .all()
        )

    # Admin back office

    def list_subscriptions(self) -> list[Subscription]:
        return (
            self.db.query(Subscription)
            .options(joinedload(Subscription.plan), selectinload(Subscription.payments))
            .order_by(Subscription.created_at.desc())
            .all()
        )

    def get_subscription(self, subscription_id: uuid.UUID) -> Subscription:
        subscription = (
            self.db.query(Subscription)
            .options(joinedload(Subscription.plan), selectinload(Subscription.payments))
            .filter(Subscription.id == subscription_id)
            .first()
        )
        if subscription is None:
            raise NotFoundError("Subscription not found")
        return subscription

    def grant_subscription(
        self,
        seller_id: Optional[uuid.UUID],
        plan_id: Optional[uuid.UUID],
        duration_months: Optional[int],
        is_active: Optional[bool] = None,
    ) -> Subscription:
        """Create a subscription directly, without a payment to review."""
        if seller_id is None or plan_id is None or not duration_months:
            raise ValidationError("Missing required fields")
        if duration_months < 0:
            raise ValidationError("durationMonths must be positive")
        if self.db.get(Seller, seller_id) is None:
            raise NotFoundError("Seller not found")
        plan = get_plan(self.db, plan_id)

        activate = True if is_active is None else is_active
        start_date = utc_now()
        try:
            subscription = Subscription(
                seller_id=seller_id,
                plan_id=plan.id,
                start_date=start_date,
                end_date=add_months(start_date, duration_months),
                is_active=activate,
            )
            self.db.add(subscription)
            self.db.flush()
            if activate:
                deactivate_other_subscriptions(self.db, seller_id, subscription.id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Subscription granted seller=%s plan=%s subscription=%s active=%s",
            seller_id,
            plan.id,
            subscription.id,
            activate,
        )
        return self.get_subscription(subscription.id)

    def update_subscription(
        self,
        subscription_id: uuid.UUID,
        plan_id: Optional[uuid.UUID] = None,
        end_date: Optional[datetime] = None,
        is_active: Optional[bool] = None,
    ) -> Subscription:
        subscription = self.get_subscription(subscription_id)
        if plan_id is not None:
            subscription.plan_id = get_plan(self.db, plan_id).id
        try:
            if end_date is not None:
                subscription.end_date = end_date
            if is_active is not None:
                if is_active:
                    deactivate_other_subscriptions(self.db, subscription.seller_id, subscription.id)
                subscription.is_active = is_active
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire(subscription, ["plan"])
        return self.get_subscription(subscription_id)
