"""
Domain-Specific Event Publishing Functions.

High-level functions for publishing order, line item, table and stock events.
Routing: kitchen displays only care about work to prepare, waiters about
their tables and food coming out, admin sees everything.
"""

from __future__ import annotations

import redis.asyncio as redis

from .event_types import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    ITEM_STATUS_CHANGED,
    TABLE_STATUS_CHANGED,
    STOCK_LOW,
)
from .event_schema import Event
from .channels import channel_kitchen, channel_waiters, channel_admin
from .publisher import publish_event

# Order statuses the kitchen reacts to (new work or work leaving the queue)
_KITCHEN_ORDER_STATUSES = frozenset({"in_preparation", "cancelled", "paid"})


async def publish_order_event(
    redis_client: redis.Redis,
    event_type: str,
    order_id: int,
    table_id: int,
    order_status: str,
    total_cents: int | None = None,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
) -> None:
    """
    Publish ORDER_CREATED / ORDER_STATUS_CHANGED.

    New orders always reach the kitchen. Status changes reach it only when
    they add or remove kitchen work.
    """
    entity: dict = {"order_id": order_id, "status": order_status}
    if total_cents is not None:
        entity["total_cents"] = total_cents

    event = Event(
        type=event_type,
        table_id=table_id,
        entity=entity,
        actor={"user_id": actor_user_id, "role": actor_role},
    )

    if event_type == ORDER_CREATED or (
        event_type == ORDER_STATUS_CHANGED and order_status in _KITCHEN_ORDER_STATUSES
    ):
        await publish_event(redis_client, channel_kitchen(), event)
    await publish_event(redis_client, channel_waiters(), event)
    await publish_event(redis_client, channel_admin(), event)


async def publish_item_event(
    redis_client: redis.Redis,
    order_id: int,
    line_item_id: int,
    table_id: int,
    item_status: str,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
) -> None:
    """Publish ITEM_STATUS_CHANGED to kitchen and waiters."""
    event = Event(
        type=ITEM_STATUS_CHANGED,
        table_id=table_id,
        entity={"order_id": order_id, "line_item_id": line_item_id, "status": item_status},
        actor={"user_id": actor_user_id, "role": actor_role},
    )

    await publish_event(redis_client, channel_kitchen(), event)
    await publish_event(redis_client, channel_waiters(), event)


async def publish_table_event(
    redis_client: redis.Redis,
    table_id: int,
    table_number: int,
    table_status: str,
    assigned_staff_id: int | None = None,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
) -> None:
    """Publish TABLE_STATUS_CHANGED to waiters and admin."""
    event = Event(
        type=TABLE_STATUS_CHANGED,
        table_id=table_id,
        entity={
            "table_number": table_number,
            "table_status": table_status,
            "assigned_staff_id": assigned_staff_id,
        },
        actor={"user_id": actor_user_id, "role": actor_role},
    )

    await publish_event(redis_client, channel_waiters(), event)
    await publish_event(redis_client, channel_admin(), event)


async def publish_stock_alert(
    redis_client: redis.Redis,
    product_id: int,
    product_name: str,
    stock_actual: int,
    stock_minimo: int,
) -> None:
    """Publish STOCK_LOW to admin only."""
    event = Event(
        type=STOCK_LOW,
        entity={
            "product_id": product_id,
            "name": product_name,
            "stock_actual": stock_actual,
            "stock_minimo": stock_minimo,
        },
    )

    await publish_event(redis_client, channel_admin(), event)
