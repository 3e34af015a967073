"""
Domain Services.

Routers stay thin: they check roles, call a service, and publish events
after the service has committed.

    Router (thin controller)
        ↓
    Service (business logic, transaction owner)  ← YOU ARE HERE
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import OrderLedger

    ledger = OrderLedger(db)
    order, opened_table = ledger.create_order(table_id, staff_id, items)
"""

from .catalog_service import CatalogService, build_product_output
from .kitchen_queue import KitchenEntry, KitchenQueueProjection
from .order_service import OrderLedger, build_line_item_output, build_order_output
from .staff_service import StaffService
from .state_machines import derive_order_status
from .stock_ledger import LowStockAlert, StockLedger
from .table_service import UNSET, TableService

__all__ = [
    "CatalogService",
    "build_product_output",
    "KitchenEntry",
    "KitchenQueueProjection",
    "OrderLedger",
    "build_line_item_output",
    "build_order_output",
    "StaffService",
    "derive_order_status",
    "LowStockAlert",
    "StockLedger",
    "UNSET",
    "TableService",
]
