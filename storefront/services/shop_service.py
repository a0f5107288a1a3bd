from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from storefront.core.exceptions import ForbiddenError, ValidationError
from storefront.core.logger import get_logger
from storefront.models import Product, SellerShop
from storefront.schemas.product import ProductCreate, ShopCreate
from storefront.services.quota import QuotaService

logger = get_logger(__name__)


class ShopService:
    def __init__(self, db: Session):
        self.db = db

    def list_shops(self, seller_id: uuid.UUID) -> list[SellerShop]:
        return (
            self.db.query(SellerShop)
            .filter(SellerShop.seller_id == seller_id)
            .order_by(SellerShop.created_at.asc())
            .all()
        )

    def create_shop(self, seller_id: uuid.UUID, payload: ShopCreate) -> SellerShop:
        shop_name = (payload.shop_name or "").strip()
        if not shop_name:
            raise ValidationError("Shop name is required")

        existing = self.list_shops(seller_id)
        # First shop becomes the default.
        make_default = payload.is_default or not existing
        try:
            if make_default:
                for shop in existing:
                    shop.is_default = False
            shop = SellerShop(
                seller_id=seller_id,
                shop_name=shop_name,
                description=payload.description,
                is_default=make_default,
            )
            self.db.add(shop)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return shop

    def list_products(self, seller_id: uuid.UUID, shop_id: Optional[uuid.UUID] = None) -> list[Product]:
        query = (
            self.db.query(Product)
            .join(SellerShop, Product.shop_id == SellerShop.id)
            .filter(SellerShop.seller_id == seller_id)
        )
        if shop_id is not None:
            query = query.filter(Product.shop_id == shop_id)
        return query.order_by(Product.created_at.desc()).all()

    def create_product(self, seller_id: uuid.UUID, payload: ProductCreate) -> Product:
        QuotaService(self.db).ensure_can_create_product(seller_id)

        if not payload.title or not payload.price:
            raise ValidationError("Title and price are required")
        if payload.shop_id is None:
            raise ValidationError("Shop ID is required")

        shop_ids = {shop.id for shop in self.list_shops(seller_id)}
        if payload.shop_id not in shop_ids:
            raise ForbiddenError("The specified shop does not belong to you")

        try:
            product = Product(
                shop_id=payload.shop_id,
                title=payload.title,
                description=payload.description,
                price=payload.price,
                inventory=payload.inventory,
                is_active=payload.is_active,
            )
            self.db.add(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Product %s created in shop %s", product.id, product.shop_id)
        return product
