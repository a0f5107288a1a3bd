from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from storefront.schemas import CamelModel


class PlanOut(CamelModel):
    id: uuid.UUID
    name: str
    price: int
    features: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("feature_list", "features"),
    )
    max_products: int
    is_unlimited: bool = False
    created_at: Optional[datetime] = None


class PlanResponse(CamelModel):
    success: bool = True
    plan: PlanOut


class PlanListResponse(CamelModel):
    success: bool = True
    plans: list[PlanOut]
