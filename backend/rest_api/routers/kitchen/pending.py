"""
Kitchen router.
Polling view of outstanding work for the kitchen and bar displays.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import ALL_STAFF_ROLES, KitchenFilter
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_roles
from shared.utils.schemas import KitchenPendingOutput
from rest_api.services.domain import KitchenQueueProjection


router = APIRouter(prefix="/api/kitchen", tags=["kitchen"])


@router.get("/pending", response_model=KitchenPendingOutput)
def get_pending_work(
    category: KitchenFilter = Query(default=KitchenFilter.ALL),
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> KitchenPendingOutput:
    """
    Outstanding line items grouped by order, oldest order first.

    - category=food: only the kitchen category (platos)
    - category=drink: everything else (bar)

    Paid and cancelled orders never appear. Orders with nothing left to
    prepare for the chosen category are omitted. Clients poll every
    refresh_seconds.
    """
    require_roles(ctx, ALL_STAFF_ROLES)

    now = datetime.now(timezone.utc)
    entries = KitchenQueueProjection(db).pending_work(category, now=now)
    return KitchenPendingOutput(
        category=category,
        refresh_seconds=settings.kitchen_refresh_seconds,
        generated_at=now,
        orders=[entry.to_output() for entry in entries],
    )
