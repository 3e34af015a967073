"""
Physical table model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import TableStatus
from .base import AuditMixin, Base, BigIntPK, enum_column

if TYPE_CHECKING:
    from .order import Order
    from .user import User


class Table(AuditMixin, Base):
    """
    Physical table on the dining floor.
    Status changes only through the table service and order settlement.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    status: Mapped[TableStatus] = mapped_column(
        enum_column(TableStatus), default=TableStatus.FREE, nullable=False, index=True
    )
    assigned_staff_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=True, index=True
    )

    __table_args__ = (
        CheckConstraint("capacity > 0", name="chk_table_capacity_positive"),
    )

    # Relationships
    assigned_staff: Mapped[Optional["User"]] = relationship()
    orders: Mapped[list["Order"]] = relationship(back_populates="table")

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, number={self.number}, status='{self.status}')>"
