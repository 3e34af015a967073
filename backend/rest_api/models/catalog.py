"""
Catalog Model: Product.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.config.settings import settings
from .base import AuditMixin, Base, BigIntPK


class Product(AuditMixin, Base):
    """
    Sellable product with its stock level.

    stock_actual is written only through the stock ledger
    (row lock + guarded decrement), never assigned directly by handlers.
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[str] = mapped_column(Text, nullable=False, index=True)  # "Plato", "Bebida"
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stock_actual: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stock_minimo: Mapped[int] = mapped_column(
        Integer, default=settings.default_stock_minimo, nullable=False
    )
    unit: Mapped[str] = mapped_column(Text, default="unidad", nullable=False)

    __table_args__ = (
        CheckConstraint("stock_actual >= 0", name="chk_product_stock_non_negative"),
        CheckConstraint("stock_minimo >= 0", name="chk_product_stock_minimo_non_negative"),
        CheckConstraint("price_cents >= 0", name="chk_product_price_non_negative"),
        CheckConstraint("cost_cents >= 0", name="chk_product_cost_non_negative"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock_actual <= self.stock_minimo

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock_actual})>"
