"""
Event Services - Real-time notifications for the dining floor.

Routers call the schedule_* helpers after a service has committed.
"""

from .floor_events import (
    schedule_order_event,
    schedule_item_event,
    schedule_table_event,
    schedule_stock_alerts,
)

__all__ = [
    "schedule_order_event",
    "schedule_item_event",
    "schedule_table_event",
    "schedule_stock_alerts",
]
