"""
Orders router.
Handles order creation, status changes and line item progress.

Business rules live in OrderLedger; this module checks roles, calls the
ledger and schedules notifications once the change is committed.
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import (
    ALL_STAFF_ROLES,
    FLOOR_ROLES,
    LINE_ITEM_TRANSITION_ROLES,
    ORDER_TRANSITION_ROLES,
    OrderStatus,
)
from shared.infrastructure.db import get_db
from shared.security.auth import (
    current_staff_id,
    current_user_context,
    primary_role,
    require_roles,
)
from shared.utils.schemas import (
    CreateOrderRequest,
    LineItemOutput,
    OrderOutput,
    UpdateLineItemStatusRequest,
    UpdateOrderStatusRequest,
)
from rest_api.services.domain import OrderLedger, build_line_item_output, build_order_output
from rest_api.services.events import (
    schedule_item_event,
    schedule_order_event,
    schedule_stock_alerts,
    schedule_table_event,
)


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    """
    Place a new order on a table.

    Stock for every line item is reserved in the same transaction; if any
    product is short the whole order is rejected and nothing changes.
    A free table becomes occupied.

    Requires WAITER or ADMIN role.
    """
    require_roles(ctx, FLOOR_ROLES)
    staff_id = current_staff_id(ctx)

    order, opened_table = OrderLedger(db).create_order(
        table_id=body.table_id,
        staff_id=staff_id,
        items=body.items,
        notes=body.notes,
    )

    actor_role = primary_role(ctx)
    schedule_order_event(
        background_tasks, order, created=True, actor_user_id=staff_id, actor_role=actor_role
    )
    if opened_table is not None:
        schedule_table_event(
            background_tasks, opened_table, actor_user_id=staff_id, actor_role=actor_role
        )
    schedule_stock_alerts(background_tasks, [item.product for item in order.items])

    return build_order_output(order)


@router.get("", response_model=list[OrderOutput])
def list_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> list[OrderOutput]:
    """List orders, newest first, optionally filtered by status."""
    require_roles(ctx, ALL_STAFF_ROLES)
    return [build_order_output(order) for order in OrderLedger(db).list_orders(status_filter)]


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    require_roles(ctx, ALL_STAFF_ROLES)
    return build_order_output(OrderLedger(db).get_order(order_id))


@router.patch("/{order_id}/status", response_model=OrderOutput)
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> OrderOutput:
    """
    Move an order to a new status.

    Valid transitions:
    - pending -> in_preparation | cancelled
    - in_preparation -> ready | cancelled
    - ready -> delivered
    - delivered -> paid (frees the table when nothing else is open on it)

    Allowed roles depend on the target status.
    """
    require_roles(ctx, ORDER_TRANSITION_ROLES.get(body.status, ALL_STAFF_ROLES))
    staff_id = current_staff_id(ctx)

    order, released_table = OrderLedger(db).update_order_status(
        order_id,
        body.status,
        payment_method=body.payment_method,
    )

    actor_role = primary_role(ctx)
    schedule_order_event(background_tasks, order, actor_user_id=staff_id, actor_role=actor_role)
    if released_table is not None:
        schedule_table_event(
            background_tasks, released_table, actor_user_id=staff_id, actor_role=actor_role
        )

    return build_order_output(order)


@router.patch("/{order_id}/items/{line_item_id}/status", response_model=LineItemOutput)
def update_line_item_status(
    order_id: int,
    line_item_id: int,
    body: UpdateLineItemStatusRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ctx: dict[str, Any] = Depends(current_user_context),
) -> LineItemOutput:
    """
    Move one line item along pending -> in_preparation -> ready -> delivered.

    Cancelling (before the item is ready) returns its stock and lowers the
    order total. Returns the updated item.
    """
    require_roles(ctx, LINE_ITEM_TRANSITION_ROLES.get(body.status, ALL_STAFF_ROLES))
    staff_id = current_staff_id(ctx)

    ledger = OrderLedger(db)
    item = ledger.update_line_item_status(order_id, line_item_id, body.status)

    schedule_item_event(
        background_tasks,
        item,
        table_id=item.order.table_id,
        actor_user_id=staff_id,
        actor_role=primary_role(ctx),
    )

    return build_line_item_output(item)
