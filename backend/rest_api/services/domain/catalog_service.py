"""
Product Catalog Service.

Read access to products for the order form and the inventory screen.
Stock changes go through StockLedger, never through here.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.utils.schemas import ProductOutput
from rest_api.models import Product


def build_product_output(product: Product) -> ProductOutput:
    return ProductOutput(
        id=product.id,
        name=product.name,
        description=product.description,
        category=product.category,
        price_cents=product.price_cents,
        cost_cents=product.cost_cents,
        stock_actual=product.stock_actual,
        stock_minimo=product.stock_minimo,
        unit=product.unit,
        is_low_stock=product.is_low_stock,
    )


class CatalogService:
    """Domain service for product lookups."""

    def __init__(self, db: Session):
        self._db = db

    def list_products(self, category: str | None = None) -> list[Product]:
        """Active products by name, optionally restricted to one category."""
        stmt = select(Product).where(Product.is_active.is_(True)).order_by(Product.name)
        if category:
            stmt = stmt.where(Product.category == category)
        return list(self._db.scalars(stmt).all())

    def list_categories(self) -> list[str]:
        return list(
            self._db.scalars(
                select(Product.category)
                .where(Product.is_active.is_(True))
                .distinct()
                .order_by(Product.category)
            ).all()
        )
