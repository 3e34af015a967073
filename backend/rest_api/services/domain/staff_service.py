"""
Staff Service.

Read-only staff directory used for table assignment and display names.
Accounts themselves are managed by the identity provider.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.utils.schemas import StaffOutput
from rest_api.models import User


class StaffService:
    """Service for listing staff members."""

    def __init__(self, db: Session):
        self._db = db

    def list_staff(self, role: Roles | None = None) -> list[StaffOutput]:
        stmt = select(User).where(User.is_active.is_(True)).order_by(User.last_name, User.first_name, User.id)
        if role is not None:
            stmt = stmt.where(User.role == Roles(role))
        return [
            StaffOutput(
                id=user.id,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                display_name=user.display_name,
                role=user.role,
            )
            for user in self._db.scalars(stmt).all()
        ]
