"""
SQLAlchemy models for the storefront platform.
"""
from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.types import TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

JSONType = JSON().with_variant(JSONB(), "postgresql")

# Quota value stored for plans without a product limit.
UNLIMITED_PRODUCTS = 999999

PAYMENT_PENDING = "pending"
PAYMENT_APPROVED = "approved"
PAYMENT_REJECTED = "rejected"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_APPROVED, PAYMENT_REJECTED)
REVIEW_DECISIONS = (PAYMENT_APPROVED, PAYMENT_REJECTED)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend; naive values are taken as UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Seller(Base):
    __tablename__ = "sellers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(Text, unique=True, nullable=False)
    shop_name = Column(Text)
    mobile = Column(Text, unique=True)
    email = Column(Text)
    instagram_id = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime, default=utc_now)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now)

    shops = relationship("SellerShop", back_populates="seller", order_by="SellerShop.created_at")
    subscriptions = relationship("Subscription", back_populates="seller")


class SellerShop(Base):
    __tablename__ = "seller_shops"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    seller_id = Column(Uuid, ForeignKey("sellers.id", ondelete="CASCADE"), nullable=False, index=True)
    shop_name = Column(Text, nullable=False)
    description = Column(Text)
    is_default = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime, default=utc_now)

    seller = relationship("Seller", back_populates="shops")
    products = relationship("Product", back_populates="shop")


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    shop_id = Column(Uuid, ForeignKey("seller_shops.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    price = Column(Integer, nullable=False)
    inventory = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime, default=utc_now)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now)

    shop = relationship("SellerShop", back_populates="products")


class Plan(Base):
    __tablename__ = "plans"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    features = Column(JSONType, default=list)
    max_products = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, default=utc_now)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now)

    subscriptions = relationship("Subscription", back_populates="plan")

    @property
    def feature_list(self) -> list[str]:
        """Ordered feature strings, tolerating rows written as JSON text or objects."""
        value = self.features
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return []
        if isinstance(value, dict):
            value = list(value.values())
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]

    @property
    def is_unlimited(self) -> bool:
        return self.max_products >= UNLIMITED_PRODUCTS


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    seller_id = Column(Uuid, ForeignKey("sellers.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(Uuid, ForeignKey("plans.id"), nullable=False)
    start_date = Column(UTCDateTime, nullable=False)
    end_date = Column(UTCDateTime, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)
    created_at = Column(UTCDateTime, default=utc_now)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now)

    seller = relationship("Seller", back_populates="subscriptions")
    plan = relationship("Plan", back_populates="subscriptions")
    payments = relationship(
        "PlanPayment",
        back_populates="subscription",
        order_by="PlanPayment.created_at.desc()",
    )


class PlanPayment(Base):
    __tablename__ = "plan_payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    subscription_id = Column(Uuid, ForeignKey("subscriptions.id", ondelete="CASCADE"), nullable=False, index=True)
    seller_id = Column(Uuid, ForeignKey("sellers.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    status = Column(Text, default=PAYMENT_PENDING, nullable=False)
    receipt_info = Column(JSONType, default=dict)
    notes = Column(Text)
    reviewed_at = Column(UTCDateTime)
    reviewed_by = Column(Text)
    created_at = Column(UTCDateTime, default=utc_now)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now)

    subscription = relationship("Subscription", back_populates="payments")
    seller = relationship("Seller")
