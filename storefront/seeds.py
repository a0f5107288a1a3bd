from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from storefront.models import UNLIMITED_PRODUCTS, Plan

PLAN_SEED_DATA: list[dict[str, Any]] = [
    {
        "name": "Basic",
        "price": 99000,
        "max_products": 20,
        "features": [
            "Up to 20 products",
            "Product image gallery",
            "Dedicated storefront page",
        ],
    },
    {
        "name": "Pro",
        "price": 199000,
        "max_products": 100,
        "features": [
            "Up to 100 products",
            "Product image gallery",
            "Dedicated storefront page",
            "Advanced sales reports",
            "Dedicated support",
        ],
    },
    {
        "name": "Premium",
        "price": 299000,
        "max_products": UNLIMITED_PRODUCTS,
        "features": [
            "Unlimited products",
            "Product image gallery",
            "Dedicated storefront page",
            "Advanced sales reports",
            "Dedicated support",
            "Dedicated mobile app",
        ],
    },
]


def seed_plans(db: Session) -> int:
    existing = {name for (name,) in db.query(Plan.name).all()}
    inserted = 0
    for item in PLAN_SEED_DATA:
        if item["name"] in existing:
            continue
        db.add(Plan(**item))
        inserted += 1
    if inserted:
        db.commit()
    return inserted
