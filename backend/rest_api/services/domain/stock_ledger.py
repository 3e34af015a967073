"""
Stock Ledger.

The only writer of Product.stock_actual. Every change follows the same
discipline inside the caller's transaction:

1. lock the product row (SELECT ... FOR UPDATE, ascending id when several)
2. apply a guarded UPDATE whose WHERE clause re-checks availability

Zero rows updated means the stock was not there, whatever the locking
backend did. The ledger never commits; the caller owns the unit of work.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shared.config.logging import inventory_logger as logger
from shared.utils.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)
from rest_api.models import Product


@dataclass(frozen=True)
class LowStockAlert:
    """Product at or below its minimum, with its severity ratio."""

    product_id: int
    name: str
    category: str
    unit: str
    stock_actual: int
    stock_minimo: int

    @property
    def ratio(self) -> float:
        # A minimum of zero can only list an empty product: worst severity
        if self.stock_minimo <= 0:
            return 0.0
        return self.stock_actual / self.stock_minimo


class StockLedger:
    """Atomic check-and-decrement of product stock."""

    def __init__(self, db: Session):
        self._db = db

    def lock_products(self, product_ids: Iterable[int]) -> dict[int, Product]:
        """
        Lock every listed product row in ascending id order.

        Locking in a fixed order keeps two orders that share products from
        deadlocking each other. Unknown ids are simply absent from the result.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        products = self._db.scalars(
            select(Product)
            .where(Product.id.in_(ids), Product.is_active.is_(True))
            .order_by(Product.id)
            .with_for_update()
        ).all()
        return {p.id: p for p in products}

    def _lock_one(self, product_id: int, active_only: bool = True) -> Product:
        stmt = select(Product).where(Product.id == product_id).with_for_update()
        if active_only:
            stmt = stmt.where(Product.is_active.is_(True))
        product = self._db.scalar(stmt)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _apply_delta(self, product: Product, delta: int) -> bool:
        stmt = (
            update(Product)
            .where(Product.id == product.id)
            .values(stock_actual=Product.stock_actual + delta)
            .execution_options(synchronize_session=False)
        )
        if delta < 0:
            stmt = stmt.where(Product.stock_actual >= -delta)
        result = self._db.execute(stmt)
        # Reload so callers never see the value read before the update
        self._db.refresh(product, ["stock_actual"])
        return result.rowcount == 1

    def reserve(self, product_id: int, quantity: int) -> Product:
        """
        Decrement stock by quantity, or fail without touching it.

        Raises:
            ProductNotFoundError: unknown or inactive product
            InsufficientStockError: quantity exceeds stock_actual (no partial fulfilment)
        """
        if quantity <= 0:
            raise ValidationError("La cantidad debe ser mayor a cero", product_id=product_id)

        product = self._lock_one(product_id)
        if not self._apply_delta(product, -quantity):
            raise InsufficientStockError(
                product.id, product.name, requested=quantity, available=product.stock_actual
            )

        logger.debug(
            "Stock reserved",
            product_id=product.id,
            quantity=quantity,
            stock_actual=product.stock_actual,
        )
        return product

    def release(self, product_id: int, quantity: int) -> Product:
        """Return previously reserved stock (cancellation compensation)."""
        if quantity <= 0:
            raise ValidationError("La cantidad debe ser mayor a cero", product_id=product_id)

        product = self._lock_one(product_id, active_only=False)
        self._apply_delta(product, quantity)

        logger.debug(
            "Stock released",
            product_id=product.id,
            quantity=quantity,
            stock_actual=product.stock_actual,
        )
        return product

    def adjust(self, product_id: int, delta: int) -> Product:
        """
        Manual stock correction by staff. Positive adds, negative removes.

        Raises:
            InsufficientStockError: the correction would leave stock below zero
        """
        if delta == 0:
            raise ValidationError("El ajuste de stock no puede ser cero", product_id=product_id)

        product = self._lock_one(product_id)
        if not self._apply_delta(product, delta):
            raise InsufficientStockError(
                product.id, product.name, requested=-delta, available=product.stock_actual
            )

        logger.info(
            "Stock adjusted",
            product_id=product.id,
            delta=delta,
            stock_actual=product.stock_actual,
        )
        return product

    def low_stock_alerts(self) -> list[LowStockAlert]:
        """
        Products with stock_actual <= stock_minimo, worst first.

        Ordered by ascending stock_actual / stock_minimo, ties by name.
        """
        products = self._db.scalars(
            select(Product).where(
                Product.is_active.is_(True),
                Product.stock_actual <= Product.stock_minimo,
            )
        ).all()

        alerts = [
            LowStockAlert(
                product_id=p.id,
                name=p.name,
                category=p.category,
                unit=p.unit,
                stock_actual=p.stock_actual,
                stock_minimo=p.stock_minimo,
            )
            for p in products
        ]
        alerts.sort(key=lambda a: (a.ratio, a.name))
        return alerts
