from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from storefront.models import PlanPayment, Subscription
from storefront.services.subscription_service import SubscriptionService, add_months, normalize_receipt
from tests.factories import create_payment, create_plan, create_seller, create_subscription


def test_normalize_receipt_accepts_objects_and_json_text():
    assert normalize_receipt({"key": "receipts/a.png"}) == {"key": "receipts/a.png"}
    assert normalize_receipt('{"key": "receipts/a.png", "size": 10}') == {
        "key": "receipts/a.png",
        "size": 10,
    }


def test_normalize_receipt_wraps_unparseable_text():
    assert normalize_receipt("bank ref 1234") == {"rawData": "bank ref 1234"}
    assert normalize_receipt("[1, 2]") == {"rawData": "[1, 2]"}


def test_normalize_receipt_rejects_other_types():
    with pytest.raises(ValidationError):
        normalize_receipt(42)


def test_add_months_clamps_to_month_end():
    from datetime import datetime

    assert add_months(datetime(2026, 1, 31), 1) == datetime(2026, 2, 28)
    assert add_months(datetime(2026, 11, 15), 3) == datetime(2027, 2, 15)


def test_first_purchase_creates_inactive_subscription_and_pending_payment(db):
    seller = create_seller(db)
    plan = create_plan(db, price=99000, max_products=20)

    subscription, payment = SubscriptionService(db).submit_plan_purchase(
        seller.id, plan.id, {"key": "receipts/1.png"}
    )

    assert subscription.is_active is False
    assert subscription.plan_id == plan.id
    assert subscription.end_date - subscription.start_date == timedelta(days=30)
    assert payment.status == "pending"
    assert payment.amount == 99000
    assert payment.subscription_id == subscription.id
    assert payment.receipt_info == {"key": "receipts/1.png"}
    assert db.query(Subscription).filter_by(seller_id=seller.id).count() == 1
    assert db.query(PlanPayment).filter_by(seller_id=seller.id).count() == 1


def test_renewal_updates_active_subscription_in_place(db):
    seller = create_seller(db)
    old_plan = create_plan(db, name="Basic")
    new_plan = create_plan(db, name="Pro", price=199000, max_products=100)
    existing = create_subscription(db, seller, old_plan, is_active=True)
    create_payment(db, existing, status="approved")

    subscription, payment = SubscriptionService(db).submit_plan_purchase(
        seller.id, new_plan.id, "receipt-text"
    )

    assert subscription.id == existing.id
    assert subscription.is_active is False
    assert subscription.plan_id == new_plan.id
    assert payment.amount == 199000
    assert payment.receipt_info == {"rawData": "receipt-text"}
    assert db.query(Subscription).filter_by(seller_id=seller.id).count() == 1
    assert db.query(PlanPayment).filter_by(subscription_id=existing.id).count() == 2


def test_custom_period_length(db):
    seller = create_seller(db)
    plan = create_plan(db)

    subscription, _ = SubscriptionService(db, period_days=7).submit_plan_purchase(
        seller.id, plan.id, {"key": "k"}
    )

    assert subscription.end_date - subscription.start_date == timedelta(days=7)


def test_missing_fields_are_rejected(db):
    seller = create_seller(db)
    plan = create_plan(db)
    service = SubscriptionService(db)

    with pytest.raises(ValidationError):
        service.submit_plan_purchase(seller.id, None, {"key": "k"})
    with pytest.raises(ValidationError):
        service.submit_plan_purchase(seller.id, plan.id, None)
    with pytest.raises(ValidationError):
        service.submit_plan_purchase(seller.id, plan.id, "")


def test_unknown_plan_is_not_found(db):
    seller = create_seller(db)

    with pytest.raises(NotFoundError):
        SubscriptionService(db).submit_plan_purchase(seller.id, uuid4(), {"key": "k"})


def test_unknown_seller_is_unauthorized(db):
    plan = create_plan(db)

    with pytest.raises(UnauthorizedError):
        SubscriptionService(db).submit_plan_purchase(uuid4(), plan.id, {"key": "k"})


def test_failed_commit_leaves_no_partial_state(db, monkeypatch):
    seller = create_seller(db)
    plan = create_plan(db)

    def failing_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(SQLAlchemyError):
        SubscriptionService(db).submit_plan_purchase(seller.id, plan.id, {"key": "k"})
    monkeypatch.undo()

    assert db.query(Subscription).count() == 0
    assert db.query(PlanPayment).count() == 0


def test_subscription_status_reports_pending_purchase(db):
    seller = create_seller(db)
    plan = create_plan(db)
    service = SubscriptionService(db)
    subscription, _ = service.submit_plan_purchase(seller.id, plan.id, {"key": "k"})

    status = service.get_subscription_status(seller.id)

    assert status["has_active_subscription"] is False
    assert status["has_pending_subscription"] is True
    assert status["pending_payment_status"] == "pending"
    assert status["pending_subscription"]["id"] == subscription.id


def test_subscription_status_reports_active_plan(db):
    seller = create_seller(db)
    plan = create_plan(db)
    active = create_subscription(db, seller, plan, is_active=True)

    status = SubscriptionService(db).get_subscription_status(seller.id)

    assert status["has_active_subscription"] is True
    assert status["subscription"]["id"] == active.id
    assert status["pending_subscription"] is None


def test_grant_subscription_deactivates_previous_plan(db):
    seller = create_seller(db)
    plan = create_plan(db)
    previous = create_subscription(db, seller, plan, is_active=True)

    granted = SubscriptionService(db).grant_subscription(seller.id, plan.id, 3, True)

    db.refresh(previous)
    assert granted.is_active is True
    assert previous.is_active is False


def test_grant_subscription_requires_existing_seller(db):
    plan = create_plan(db)

    with pytest.raises(NotFoundError):
        SubscriptionService(db).grant_subscription(uuid4(), plan.id, 1)
    with pytest.raises(ValidationError):
        SubscriptionService(db).grant_subscription(uuid4(), plan.id, None)
