"""
Products router.
Read-only catalog for the order form and the inventory screen.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import ALL_STAFF_ROLES
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_roles
from shared.utils.schemas import ProductOutput
from rest_api.services.domain import CatalogService, build_product_output


router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=list[ProductOutput])
def list_products(
    category: str | None = Query(default=None, description="Filter by category name"),
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[ProductOutput]:
    """Active products ordered by name, with current stock."""
    require_roles(ctx, ALL_STAFF_ROLES)
    return [build_product_output(p) for p in CatalogService(db).list_products(category)]


@router.get("/categories", response_model=list[str])
def list_categories(
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[str]:
    require_roles(ctx, ALL_STAFF_ROLES)
    return CatalogService(db).list_categories()
