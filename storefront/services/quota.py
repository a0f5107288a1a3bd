from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.core.exceptions import ForbiddenError
from storefront.core.logger import get_logger
from storefront.models import Product, SellerShop, Subscription
from storefront.services.subscription_service import find_current_subscription

logger = get_logger(__name__)

NO_SUBSCRIPTION_MESSAGE = "No active subscription found"
LIMIT_REACHED_MESSAGE = "You have reached the maximum number of products for your subscription"


class QuotaService:
    """Product quota checks. Counts are read fresh on every call."""

    def __init__(self, db: Session):
        self.db = db

    def count_products(self, seller_id: uuid.UUID) -> int:
        return (
            self.db.query(func.count(Product.id))
            .join(SellerShop, Product.shop_id == SellerShop.id)
            .filter(SellerShop.seller_id == seller_id)
            .scalar()
            or 0
        )

    def ensure_can_create_product(self, seller_id: uuid.UUID) -> Subscription:
        subscription = find_current_subscription(self.db, seller_id)
        if subscription is None:
            logger.info("Product creation denied for seller %s: no active subscription", seller_id)
            raise ForbiddenError(NO_SUBSCRIPTION_MESSAGE)

        used = self.count_products(seller_id)
        if used >= subscription.plan.max_products:
            logger.info(
                "Product creation denied for seller %s: %s/%s products",
                seller_id,
                used,
                subscription.plan.max_products,
            )
            raise ForbiddenError(LIMIT_REACHED_MESSAGE)
        return subscription

    def can_create_product(self, seller_id: uuid.UUID) -> bool:
        try:
            self.ensure_can_create_product(seller_id)
        except ForbiddenError:
            return False
        return True

    def get_usage(self, seller_id: uuid.UUID) -> dict[str, Any]:
        subscription = find_current_subscription(self.db, seller_id)
        if subscription is None:
            raise ForbiddenError(NO_SUBSCRIPTION_MESSAGE)
        plan = subscription.plan
        used = self.count_products(seller_id)
        return {
            "used": used,
            "limit": plan.max_products,
            "remaining": None if plan.is_unlimited else max(plan.max_products - used, 0),
            "unlimited": plan.is_unlimited,
        }
