from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

from storefront.core.security import Identity, create_access_token
from storefront.models import (
    PAYMENT_PENDING,
    PlanPayment,
    Plan,
    Product,
    Seller,
    SellerShop,
    Subscription,
    utc_now,
)


def create_seller(db, username: str | None = None, **overrides) -> Seller:
    seller = Seller(username=username or f"seller-{uuid4().hex[:8]}", **overrides)
    db.add(seller)
    db.commit()
    return seller


def create_plan(db, price: int = 99000, max_products: int = 20, name: str = "Basic", features=None) -> Plan:
    plan = Plan(
        name=name,
        price=price,
        max_products=max_products,
        features=features if features is not None else ["Up to 20 products"],
    )
    db.add(plan)
    db.commit()
    return plan


def create_subscription(db, seller, plan, is_active: bool = True, days: int = 30) -> Subscription:
    now = utc_now()
    subscription = Subscription(
        seller_id=seller.id,
        plan_id=plan.id,
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=days),
        is_active=is_active,
    )
    db.add(subscription)
    db.commit()
    return subscription


def create_payment(db, subscription, status: str = PAYMENT_PENDING, amount: int = 99000) -> PlanPayment:
    payment = PlanPayment(
        subscription_id=subscription.id,
        seller_id=subscription.seller_id,
        amount=amount,
        status=status,
        receipt_info={"key": "receipts/r.png"},
    )
    db.add(payment)
    db.commit()
    return payment


def create_shop(db, seller, shop_name: str = "Main shop", is_default: bool = True) -> SellerShop:
    shop = SellerShop(seller_id=seller.id, shop_name=shop_name, is_default=is_default)
    db.add(shop)
    db.commit()
    return shop


def create_products(db, shop, count: int) -> list[Product]:
    products = [
        Product(shop_id=shop.id, title=f"Product {i}", price=1000 + i, inventory=1)
        for i in range(count)
    ]
    db.add_all(products)
    db.commit()
    return products


def auth_headers(role: str, subject, email: str | None = None) -> dict:
    token = create_access_token(Identity(id=str(subject), role=role, email=email))
    return {"Authorization": f"Bearer {token}"}
