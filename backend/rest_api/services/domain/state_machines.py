"""
Status transition rules for tables, orders and line items.

Every validator is total over its enum: any (current, target) pair either
passes or raises InvalidTransitionError, and none of them mutate anything.
"""

from collections.abc import Iterable

from shared.config.constants import (
    LINE_ITEM_TRANSITIONS,
    ORDER_TRANSITIONS,
    TABLE_TRANSITIONS,
    LineItemStatus,
    OrderStatus,
    TableStatus,
)
from shared.utils.exceptions import InvalidTransitionError

LINE_ITEM_ENTITY = "ítem de pedido"
ORDER_ENTITY = "pedido"
TABLE_ENTITY = "mesa"


def can_transition_line_item(current: LineItemStatus, target: LineItemStatus) -> bool:
    return LineItemStatus(target) in LINE_ITEM_TRANSITIONS[LineItemStatus(current)]


def can_transition_order(current: OrderStatus, target: OrderStatus) -> bool:
    return OrderStatus(target) in ORDER_TRANSITIONS[OrderStatus(current)]


def can_transition_table(current: TableStatus, target: TableStatus) -> bool:
    """
    Staff-driven table edges. Same-state requests are accepted so an
    assignment change can travel without a status change.
    """
    current, target = TableStatus(current), TableStatus(target)
    return current == target or target in TABLE_TRANSITIONS[current]


def validate_line_item_transition(current: LineItemStatus, target: LineItemStatus) -> None:
    if not can_transition_line_item(current, target):
        raise InvalidTransitionError(
            LINE_ITEM_ENTITY, LineItemStatus(current).value, LineItemStatus(target).value
        )


def validate_order_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition_order(current, target):
        raise InvalidTransitionError(
            ORDER_ENTITY, OrderStatus(current).value, OrderStatus(target).value
        )


def validate_table_transition(current: TableStatus, target: TableStatus) -> None:
    if not can_transition_table(current, target):
        raise InvalidTransitionError(
            TABLE_ENTITY, TableStatus(current).value, TableStatus(target).value
        )


def derive_order_status(item_statuses: Iterable[LineItemStatus]) -> OrderStatus | None:
    """
    Coarse preparation view of an order computed from its line items.

    - pending while any item is pending or in preparation
    - ready when every non-cancelled item is ready or delivered
    - delivered when every non-cancelled item is delivered

    Returns None when every item is cancelled: cancelling an order is an
    explicit staff decision and is never inferred. Order.status is never
    written from this value.
    """
    active = [LineItemStatus(s) for s in item_statuses if s != LineItemStatus.CANCELLED]
    if not active:
        return None
    if all(s == LineItemStatus.DELIVERED for s in active):
        return OrderStatus.DELIVERED
    if all(s in (LineItemStatus.READY, LineItemStatus.DELIVERED) for s in active):
        return OrderStatus.READY
    return OrderStatus.PENDING
