"""
Floor event dispatch.

Schedules Redis notifications for committed order, line item, table and
stock changes. Routers pass their BackgroundTasks so publishing runs after
the response is sent; a failed publish is logged and never reaches the
caller, since the database change has already been committed.
"""

from fastapi import BackgroundTasks

from shared.config.constants import LineItemStatus, OrderStatus, TableStatus
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.events import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    get_redis_client,
    publish_item_event,
    publish_order_event,
    publish_stock_alert,
    publish_table_event,
)
from rest_api.models import LineItem, Order, Product, Table

logger = get_logger(__name__)


async def _publish_order(
    event_type: str,
    order_id: int,
    table_id: int,
    order_status: str,
    total_cents: int,
    actor_user_id: int | None,
    actor_role: str | None,
) -> None:
    try:
        redis_client = await get_redis_client()
        await publish_order_event(
            redis_client=redis_client,
            event_type=event_type,
            order_id=order_id,
            table_id=table_id,
            order_status=order_status,
            total_cents=total_cents,
            actor_user_id=actor_user_id,
            actor_role=actor_role,
        )
    except Exception as e:
        logger.error(
            "Failed to publish order event",
            event_type=event_type,
            order_id=order_id,
            error=str(e),
        )


async def _publish_item(
    order_id: int,
    line_item_id: int,
    table_id: int,
    item_status: str,
    actor_user_id: int | None,
    actor_role: str | None,
) -> None:
    try:
        redis_client = await get_redis_client()
        await publish_item_event(
            redis_client=redis_client,
            order_id=order_id,
            line_item_id=line_item_id,
            table_id=table_id,
            item_status=item_status,
            actor_user_id=actor_user_id,
            actor_role=actor_role,
        )
    except Exception as e:
        logger.error(
            "Failed to publish item event",
            order_id=order_id,
            line_item_id=line_item_id,
            error=str(e),
        )


async def _publish_table(
    table_id: int,
    table_number: int,
    table_status: str,
    assigned_staff_id: int | None,
    actor_user_id: int | None,
    actor_role: str | None,
) -> None:
    try:
        redis_client = await get_redis_client()
        await publish_table_event(
            redis_client=redis_client,
            table_id=table_id,
            table_number=table_number,
            table_status=table_status,
            assigned_staff_id=assigned_staff_id,
            actor_user_id=actor_user_id,
            actor_role=actor_role,
        )
    except Exception as e:
        logger.error("Failed to publish table event", table_id=table_id, error=str(e))


async def _publish_stock(
    product_id: int,
    product_name: str,
    stock_actual: int,
    stock_minimo: int,
) -> None:
    try:
        redis_client = await get_redis_client()
        await publish_stock_alert(
            redis_client=redis_client,
            product_id=product_id,
            product_name=product_name,
            stock_actual=stock_actual,
            stock_minimo=stock_minimo,
        )
    except Exception as e:
        logger.error("Failed to publish stock alert", product_id=product_id, error=str(e))


# =============================================================================
# Public API (called from routers)
# =============================================================================


def schedule_order_event(
    background_tasks: BackgroundTasks,
    order: Order,
    created: bool = False,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
) -> None:
    """Schedule ORDER_CREATED or ORDER_STATUS_CHANGED for a committed order."""
    if not settings.events_enabled:
        return
    background_tasks.add_task(
        _publish_order,
        event_type=ORDER_CREATED if created else ORDER_STATUS_CHANGED,
        order_id=order.id,
        table_id=order.table_id,
        order_status=OrderStatus(order.status).value,
        total_cents=order.total_cents,
        actor_user_id=actor_user_id,
        actor_role=actor_role,
    )


def schedule_item_event(
    background_tasks: BackgroundTasks,
    item: LineItem,
    table_id: int,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
) -> None:
    """Schedule ITEM_STATUS_CHANGED for a committed line item."""
    if not settings.events_enabled:
        return
    background_tasks.add_task(
        _publish_item,
        order_id=item.order_id,
        line_item_id=item.id,
        table_id=table_id,
        item_status=LineItemStatus(item.status).value,
        actor_user_id=actor_user_id,
        actor_role=actor_role,
    )


def schedule_table_event(
    background_tasks: BackgroundTasks,
    table: Table,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
) -> None:
    """Schedule TABLE_STATUS_CHANGED for a committed table."""
    if not settings.events_enabled:
        return
    background_tasks.add_task(
        _publish_table,
        table_id=table.id,
        table_number=table.number,
        table_status=TableStatus(table.status).value,
        assigned_staff_id=table.assigned_staff_id,
        actor_user_id=actor_user_id,
        actor_role=actor_role,
    )


def schedule_stock_alerts(background_tasks: BackgroundTasks, products: list[Product]) -> None:
    """Schedule STOCK_LOW for each product at or below its minimum."""
    if not settings.events_enabled:
        return
    seen: set[int] = set()
    for product in products:
        if product.id in seen or not product.is_low_stock:
            continue
        seen.add(product.id)
        background_tasks.add_task(
            _publish_stock,
            product_id=product.id,
            product_name=product.name,
            stock_actual=product.stock_actual,
            stock_minimo=product.stock_minimo,
        )


__all__ = [
    "schedule_order_event",
    "schedule_item_event",
    "schedule_table_event",
    "schedule_stock_alerts",
]
