"""
Tables router.
Floor view of tables and staff-driven status/assignment changes.
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.config.constants import ALL_STAFF_ROLES, FLOOR_ROLES
from shared.infrastructure.db import get_db
from shared.security.auth import (
    current_staff_id,
    current_user_context,
    primary_role,
    require_roles,
)
from shared.utils.schemas import TableOutput, UpdateTableRequest
from rest_api.services.domain import UNSET, TableService
from rest_api.services.events import schedule_table_event


router = APIRouter(prefix="/api/tables", tags=["tables"])


@router.get("", response_model=list[TableOutput])
def list_tables(
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[TableOutput]:
    """
    All active tables ordered by number.

    Each table reports how many unsettled orders still reference it.
    """
    require_roles(ctx, ALL_STAFF_ROLES)
    return TableService(db).list_tables()


@router.patch("/{table_id}", response_model=TableOutput)
def update_table(
    table_id: int,
    body: UpdateTableRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> TableOutput:
    """
    Change a table's status and/or assigned waiter.

    - occupied <-> payment_pending
    - occupied | payment_pending -> free, only when no order is still open
    - staff_id omitted keeps the assignment, null clears it

    Requires WAITER or ADMIN role.
    """
    require_roles(ctx, FLOOR_ROLES)

    staff_id = body.staff_id if "staff_id" in body.model_fields_set else UNSET
    service = TableService(db)
    table, status_changed = service.update_table(
        table_id,
        new_status=body.status,
        staff_id=staff_id,
    )

    if status_changed:
        schedule_table_event(
            background_tasks,
            table,
            actor_user_id=current_staff_id(ctx),
            actor_role=primary_role(ctx),
        )

    return service.to_output(table)
