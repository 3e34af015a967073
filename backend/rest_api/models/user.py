"""
Staff Model.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.config.constants import Roles
from .base import AuditMixin, Base, BigIntPK, enum_column


class User(AuditMixin, Base):
    """
    A staff member (admin, waiter, cook).
    Credentials live with the identity provider; this row only carries
    what orders and tables need to display.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    last_name: Mapped[Optional[str]] = mapped_column(Text)
    role: Mapped[Roles] = mapped_column(enum_column(Roles), nullable=False, index=True)

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.username

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
