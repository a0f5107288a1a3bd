"""
Admin review of submitted plan payments.

A payment moves from ``pending`` to ``approved`` or ``rejected`` exactly once.
Repeating the decision a payment already carries is a no-op; asking for the
other terminal state is refused.
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from storefront.core.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.core.logger import get_logger
from storefront.models import (
    PAYMENT_APPROVED,
    PAYMENT_PENDING,
    PAYMENT_STATUSES,
    REVIEW_DECISIONS,
    PlanPayment,
    Subscription,
    utc_now,
)
from storefront.services.subscription_service import deactivate_other_subscriptions

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def review_payment(
        self,
        payment_id: uuid.UUID,
        decision: Optional[str],
        reviewer: str,
        notes: Optional[str] = None,
    ) -> PlanPayment:
        if decision not in REVIEW_DECISIONS:
            raise ValidationError('Invalid status. Must be "approved" or "rejected"')

        payment = self.db.get(PlanPayment, payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")

        if payment.status == decision:
            logger.info("Payment %s already %s, nothing to do", payment.id, decision)
            return payment
        if payment.status != PAYMENT_PENDING:
            raise ConflictError(f"Payment has already been {payment.status}")

        try:
            payment.status = decision
            if notes:
                payment.notes = notes
            payment.reviewed_at = utc_now()
            payment.reviewed_by = reviewer

            if decision == PAYMENT_APPROVED:
                subscription = self.db.get(Subscription, payment.subscription_id)
                if subscription is None:
                    raise NotFoundError("Subscription not found")
                deactivate_other_subscriptions(self.db, subscription.seller_id, subscription.id)
                subscription.is_active = True
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Payment %s %s by %s (subscription=%s)",
            payment.id,
            decision,
            reviewer,
            payment.subscription_id,
        )
        return payment

    def list_payments(self, status: Optional[str] = None) -> list[PlanPayment]:
        query = self.db.query(PlanPayment)
        if status:
            if status not in PAYMENT_STATUSES:
                raise ValidationError(f"Unknown payment status: {status}")
            query = query.filter(PlanPayment.status == status)
        return query.order_by(PlanPayment.created_at.desc()).all()
