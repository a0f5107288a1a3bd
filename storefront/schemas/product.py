from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from storefront.schemas import CamelModel


class ShopCreate(CamelModel):
    shop_name: Optional[str] = None
    description: Optional[str] = None
    is_default: bool = False


class ShopOut(CamelModel):
    id: uuid.UUID
    seller_id: uuid.UUID
    shop_name: str
    description: Optional[str] = None
    is_default: bool
    is_active: bool
    created_at: Optional[datetime] = None


class ProductCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    inventory: int = 0
    is_active: bool = True
    shop_id: Optional[uuid.UUID] = None


class ProductOut(CamelModel):
    id: uuid.UUID
    shop_id: uuid.UUID
    title: str
    description: Optional[str] = None
    price: int
    inventory: int
    is_active: bool
    created_at: Optional[datetime] = None


class ProductUsageOut(CamelModel):
    used: int
    limit: int
    remaining: Optional[int] = None
    unlimited: bool
