"""
Inventory router.
Manual stock corrections and low-stock alerts.
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import ADMIN_ROLES, ALL_STAFF_ROLES
from shared.config.logging import inventory_logger as logger
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import current_staff_id, current_user_context, require_roles
from shared.utils.exceptions import (
    AppException,
    DatabaseError,
    NotFoundError,
    ProductNotFoundError,
)
from shared.utils.schemas import (
    LowStockAlertOutput,
    ProductOutput,
    StockAdjustmentRequest,
)
from rest_api.services.domain import StockLedger, build_product_output
from rest_api.services.events import schedule_stock_alerts


router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post("/products/{product_id}/adjust", response_model=ProductOutput)
def adjust_stock(
    product_id: int,
    body: StockAdjustmentRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> ProductOutput:
    """
    Apply a manual stock correction.

    Positive delta adds stock (deliveries), negative removes it (waste,
    counting errors). Stock can never go below zero.

    Requires ADMIN role.
    """
    require_roles(ctx, ADMIN_ROLES)

    try:
        product = StockLedger(db).adjust(product_id, body.delta)
        safe_commit(db)
    except ProductNotFoundError:
        db.rollback()
        raise NotFoundError("Producto", product_id)
    except AppException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise DatabaseError("el ajuste de stock", product_id=product_id, error=str(e))

    db.refresh(product)
    logger.info(
        "Stock adjustment committed",
        product_id=product_id,
        delta=body.delta,
        reason=body.reason,
        user_id=current_staff_id(ctx),
    )

    schedule_stock_alerts(background_tasks, [product])
    return build_product_output(product)


@router.get("/alerts", response_model=list[LowStockAlertOutput])
def low_stock_alerts(
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[LowStockAlertOutput]:
    """Products at or below their minimum stock, most critical first."""
    require_roles(ctx, ALL_STAFF_ROLES)
    return [
        LowStockAlertOutput(
            product_id=alert.product_id,
            name=alert.name,
            category=alert.category,
            unit=alert.unit,
            stock_actual=alert.stock_actual,
            stock_minimo=alert.stock_minimo,
            ratio=alert.ratio,
        )
        for alert in StockLedger(db).low_stock_alerts()
    ]
