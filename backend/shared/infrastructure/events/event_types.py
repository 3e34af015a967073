"""
Event Type Constants.

Defines all event types used in the system for Redis pub/sub.
"""

# =============================================================================
# Order lifecycle events
# =============================================================================

ORDER_CREATED = "ORDER_CREATED"
ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
ITEM_STATUS_CHANGED = "ITEM_STATUS_CHANGED"

# =============================================================================
# Table events
# =============================================================================

TABLE_STATUS_CHANGED = "TABLE_STATUS_CHANGED"

# =============================================================================
# Inventory events
# =============================================================================

STOCK_LOW = "STOCK_LOW"  # A product fell to or below its minimum

ALL_EVENT_TYPES = frozenset(
    {ORDER_CREATED, ORDER_STATUS_CHANGED, ITEM_STATUS_CHANGED, TABLE_STATUS_CHANGED, STOCK_LOW}
)

# Maximum serialized size of a single event in bytes
MAX_EVENT_SIZE = 64 * 1024
