"""
Seller-facing subscription, shop and product routes.
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import (
    get_quota_service,
    get_seller_id,
    get_shop_service,
    get_subscription_service,
)
from storefront.schemas.product import ProductCreate, ProductOut, ProductUsageOut, ShopCreate, ShopOut
from storefront.schemas.subscription import SubscriptionDetailOut, SubscriptionStatusOut
from storefront.services.quota import QuotaService
from storefront.services.shop_service import ShopService
from storefront.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("/subscription/check", response_model=SubscriptionStatusOut)
async def check_subscription(
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionStatusOut:
    return SubscriptionStatusOut.model_validate(service.get_subscription_status(seller_id))


@router.get("/subscriptions")
async def list_subscriptions(
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    subscriptions = service.list_seller_subscriptions(seller_id)
    return {
        "success": True,
        "subscriptions": [
            SubscriptionDetailOut.model_validate(s).model_dump(mode="json", by_alias=True)
            for s in subscriptions
        ],
    }


@router.get("/shops", response_model=list[ShopOut])
async def list_shops(
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: ShopService = Depends(get_shop_service),
) -> list[ShopOut]:
    return [ShopOut.model_validate(s) for s in service.list_shops(seller_id)]


@router.post("/shops", response_model=ShopOut, status_code=status.HTTP_201_CREATED)
async def create_shop(
    payload: ShopCreate,
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: ShopService = Depends(get_shop_service),
) -> ShopOut:
    return ShopOut.model_validate(service.create_shop(seller_id, payload))


@router.get("/products")
async def list_products(
    shopId: Optional[uuid.UUID] = None,
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: ShopService = Depends(get_shop_service),
) -> dict:
    products = service.list_products(seller_id, shopId)
    return {
        "products": [
            ProductOut.model_validate(p).model_dump(mode="json", by_alias=True) for p in products
        ]
    }


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    seller_id: uuid.UUID = Depends(get_seller_id),
    service: ShopService = Depends(get_shop_service),
) -> ProductOut:
    return ProductOut.model_validate(service.create_product(seller_id, payload))


@router.get("/products/usage", response_model=ProductUsageOut)
async def product_usage(
    seller_id: uuid.UUID = Depends(get_seller_id),
    quota: QuotaService = Depends(get_quota_service),
) -> ProductUsageOut:
    return ProductUsageOut.model_validate(quota.get_usage(seller_id))
