"""
Centralized constants for the backend application.
Avoid magic strings: every status and role is a closed enum.

Usage:
    from shared.config.constants import Roles, OrderStatus, ORDER_TRANSITIONS

    if role in FLOOR_ROLES:
        ...

    if order.status == OrderStatus.PENDING:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles(str, Enum):
    """Staff role tags."""

    ADMIN = "admin"
    WAITER = "waiter"
    COOK = "cook"


# Role groups for common access patterns
ALL_STAFF_ROLES: Final[frozenset[Roles]] = frozenset({Roles.ADMIN, Roles.WAITER, Roles.COOK})
FLOOR_ROLES: Final[frozenset[Roles]] = frozenset({Roles.ADMIN, Roles.WAITER})
KITCHEN_ROLES: Final[frozenset[Roles]] = frozenset({Roles.ADMIN, Roles.COOK})
ADMIN_ROLES: Final[frozenset[Roles]] = frozenset({Roles.ADMIN})


# =============================================================================
# Entity Status Enums
# =============================================================================


class TableStatus(str, Enum):
    """Physical table occupancy."""

    FREE = "free"
    OCCUPIED = "occupied"
    PAYMENT_PENDING = "payment_pending"


class OrderStatus(str, Enum):
    """Order status, set explicitly by staff."""

    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    PAID = "paid"


class LineItemStatus(str, Enum):
    """Preparation status of a single ordered product."""

    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class KitchenFilter(str, Enum):
    """Category filter for the kitchen/bar view."""

    ALL = "all"
    FOOD = "food"
    DRINK = "drink"


class Urgency(str, Enum):
    """Elapsed-time band used for kitchen display urgency."""

    NORMAL = "normal"
    WARNING = "warning"
    DANGER = "danger"


# Orders that still hold their table and may show up in the kitchen
SETTLED_ORDER_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.PAID, OrderStatus.CANCELLED}
)

# Line items still waiting on kitchen/bar work
OUTSTANDING_ITEM_STATUSES: Final[frozenset[LineItemStatus]] = frozenset(
    {LineItemStatus.PENDING, LineItemStatus.IN_PREPARATION, LineItemStatus.READY}
)

# Line items whose reserved stock goes back to the catalog when cancelled
CANCELLABLE_ITEM_STATUSES: Final[frozenset[LineItemStatus]] = frozenset(
    {LineItemStatus.PENDING, LineItemStatus.IN_PREPARATION}
)


# =============================================================================
# Status Transitions
# =============================================================================

# Valid line item status transitions (from -> allowed to states)
# pending -> in_preparation -> ready -> delivered, cancel before it is ready
LINE_ITEM_TRANSITIONS: Final[dict[LineItemStatus, frozenset[LineItemStatus]]] = {
    LineItemStatus.PENDING: frozenset({LineItemStatus.IN_PREPARATION, LineItemStatus.CANCELLED}),
    LineItemStatus.IN_PREPARATION: frozenset({LineItemStatus.READY, LineItemStatus.CANCELLED}),
    LineItemStatus.READY: frozenset({LineItemStatus.DELIVERED}),
    LineItemStatus.DELIVERED: frozenset(),  # Terminal state
    LineItemStatus.CANCELLED: frozenset(),  # Terminal state
}

# Valid order status transitions
ORDER_TRANSITIONS: Final[dict[OrderStatus, frozenset[OrderStatus]]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.IN_PREPARATION, OrderStatus.CANCELLED}),
    OrderStatus.IN_PREPARATION: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.PAID}),
    OrderStatus.CANCELLED: frozenset(),  # Terminal state
    OrderStatus.PAID: frozenset(),  # Terminal state
}

# Staff-driven table transitions. free -> occupied only happens on order creation.
TABLE_TRANSITIONS: Final[dict[TableStatus, frozenset[TableStatus]]] = {
    TableStatus.FREE: frozenset(),
    TableStatus.OCCUPIED: frozenset({TableStatus.PAYMENT_PENDING, TableStatus.FREE}),
    TableStatus.PAYMENT_PENDING: frozenset({TableStatus.OCCUPIED, TableStatus.FREE}),
}

# Role-based transition restrictions
# Format: target status -> allowed roles
LINE_ITEM_TRANSITION_ROLES: Final[dict[LineItemStatus, frozenset[Roles]]] = {
    LineItemStatus.IN_PREPARATION: KITCHEN_ROLES,
    LineItemStatus.READY: KITCHEN_ROLES,
    LineItemStatus.DELIVERED: ALL_STAFF_ROLES,
    LineItemStatus.CANCELLED: FLOOR_ROLES,
}

ORDER_TRANSITION_ROLES: Final[dict[OrderStatus, frozenset[Roles]]] = {
    OrderStatus.IN_PREPARATION: ALL_STAFF_ROLES,
    OrderStatus.READY: ALL_STAFF_ROLES,
    OrderStatus.DELIVERED: FLOOR_ROLES,
    OrderStatus.PAID: FLOOR_ROLES,
    OrderStatus.CANCELLED: FLOOR_ROLES,
}


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # String lengths
    MAX_NOTES_LENGTH: Final[int] = 500
    MAX_PAYMENT_METHOD_LENGTH: Final[int] = 50

    # Stock adjustment bounds per request
    MAX_STOCK_ADJUSTMENT: Final[int] = 100_000


# =============================================================================
# Error Messages (Spanish)
# =============================================================================


class ErrorMessages:
    """Standardized error messages in Spanish."""

    NOT_AUTHENTICATED: Final[str] = "No autenticado"
    INVALID_TOKEN: Final[str] = "Token inválido"
    TOKEN_EXPIRED: Final[str] = "Token expirado"
    TABLE_HAS_OPEN_ORDERS: Final[str] = "La mesa tiene pedidos sin cerrar"
    ORDER_SETTLED: Final[str] = "El pedido ya está cerrado"
