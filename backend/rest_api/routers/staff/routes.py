"""
Staff router.
Staff directory used for table assignment.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import ALL_STAFF_ROLES, Roles
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_roles
from shared.utils.schemas import StaffOutput
from rest_api.services.domain import StaffService


router = APIRouter(prefix="/api/staff", tags=["staff"])


@router.get("", response_model=list[StaffOutput])
def list_staff(
    role: Roles | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[StaffOutput]:
    require_roles(ctx, ALL_STAFF_ROLES)
    return StaffService(db).list_staff(role)
