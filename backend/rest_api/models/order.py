"""
Order Models: Order, LineItem.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import LineItemStatus, OrderStatus
from .base import AuditMixin, Base, BigIntPK, enum_column, utcnow

if TYPE_CHECKING:
    from .catalog import Product
    from .table import Table
    from .user import User


class Order(AuditMixin, Base):
    """
    A customer request tied to one table.

    total_cents is always recomputed from the line items
    (see Order.recompute_total), never incremented.
    """

    # "order" is a reserved SQL keyword
    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    staff_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=False, index=True
    )
    status: Mapped[OrderStatus] = mapped_column(
        enum_column(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    delivered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    total_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    payment_method: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("total_cents >= 0", name="chk_order_total_non_negative"),
        Index("ix_order_table_status", "table_id", "status"),
    )

    # Relationships
    table: Mapped["Table"] = relationship(back_populates="orders")
    staff: Mapped["User"] = relationship()
    items: Mapped[list["LineItem"]] = relationship(
        back_populates="order",
        order_by="LineItem.id",
        cascade="all, delete-orphan",
    )

    def recompute_total(self) -> int:
        """Set total_cents to the sum of non-cancelled line item subtotals."""
        self.total_cents = sum(
            item.subtotal_cents
            for item in self.items
            if item.status != LineItemStatus.CANCELLED
        )
        return self.total_cents

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, table_id={self.table_id}, status='{self.status}', total={self.total_cents})>"


class LineItem(AuditMixin, Base):
    """
    A single product entry within an order.
    Stores the price at the time of order for historical accuracy.
    """

    __tablename__ = "line_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("product.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[LineItemStatus] = mapped_column(
        enum_column(LineItemStatus), default=LineItemStatus.PENDING, nullable=False, index=True
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_line_item_quantity_positive"),
        CheckConstraint("unit_price_cents >= 0", name="chk_line_item_price_non_negative"),
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="items")
    product: Mapped["Product"] = relationship()

    @property
    def subtotal_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    def __repr__(self) -> str:
        return f"<LineItem(id={self.id}, order_id={self.order_id}, product_id={self.product_id}, status='{self.status}')>"
