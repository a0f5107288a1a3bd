from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import Plan


def list_plans(db: Session) -> list[Plan]:
    return db.query(Plan).order_by(Plan.price.asc(), Plan.name.asc()).all()


def get_plan(db: Session, plan_id: uuid.UUID) -> Plan:
    plan = db.get(Plan, plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")
    return plan
