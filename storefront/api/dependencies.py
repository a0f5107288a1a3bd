"""Shared API dependencies."""
from __future__ import annotations

import uuid

from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.core.exceptions import UnauthorizedError
from storefront.core.security import (
    Identity,
    get_current_identity,
    get_optional_identity,
    require_admin,
    require_seller,
)
from storefront.database import get_db
from storefront.services.quota import QuotaService
from storefront.services.review_service import ReviewService
from storefront.services.shop_service import ShopService
from storefront.services.subscription_service import SubscriptionService

__all__ = [
    "get_current_identity",
    "get_optional_identity",
    "require_admin",
    "require_seller",
    "get_seller_id",
    "get_subscription_service",
    "get_review_service",
    "get_quota_service",
    "get_shop_service",
]


def get_seller_id(identity: Identity = Depends(require_seller)) -> uuid.UUID:
    try:
        return uuid.UUID(identity.id)
    except ValueError:
        raise UnauthorizedError("Unauthorized")


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(db, period_days=settings.subscription_period_days)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_quota_service(db: Session = Depends(get_db)) -> QuotaService:
    return QuotaService(db)


def get_shop_service(db: Session = Depends(get_db)) -> ShopService:
    return ShopService(db)
