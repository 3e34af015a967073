"""
Event System for Real-time Notifications via Redis pub/sub.

This package provides:
- event_types.py: Event type constants
- event_schema.py: Event dataclass with validation
- channels.py: Channel naming functions
- redis_pool.py: Connection pool management
- publisher.py: Core publish_event with retry
- domain_publishers.py: High-level order/table/stock publishers

Kitchen displays still poll GET /api/kitchen/pending; these events only
tell clients when to refresh early.
"""

from .event_types import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    ITEM_STATUS_CHANGED,
    TABLE_STATUS_CHANGED,
    STOCK_LOW,
    ALL_EVENT_TYPES,
    MAX_EVENT_SIZE,
)
from .event_schema import Event
from .channels import channel_kitchen, channel_waiters, channel_admin
from .redis_pool import get_redis_pool, get_redis_client, close_redis_pool
from .publisher import publish_event
from .domain_publishers import (
    publish_order_event,
    publish_item_event,
    publish_table_event,
    publish_stock_alert,
)

__all__ = [
    # Event types
    "ORDER_CREATED",
    "ORDER_STATUS_CHANGED",
    "ITEM_STATUS_CHANGED",
    "TABLE_STATUS_CHANGED",
    "STOCK_LOW",
    "ALL_EVENT_TYPES",
    "MAX_EVENT_SIZE",
    # Schema
    "Event",
    # Channels
    "channel_kitchen",
    "channel_waiters",
    "channel_admin",
    # Redis pool
    "get_redis_pool",
    "get_redis_client",
    "close_redis_pool",
    # Publishing
    "publish_event",
    "publish_order_event",
    "publish_item_event",
    "publish_table_event",
    "publish_stock_alert",
]
