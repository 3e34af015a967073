"""
SQLAlchemy ORM Models Package.

- base: Base class, AuditMixin, column helpers
- user: User (staff)
- table: Table
- catalog: Product
- order: Order, LineItem
"""

from .base import Base, AuditMixin
from .user import User
from .table import Table
from .catalog import Product
from .order import Order, LineItem

__all__ = [
    "Base",
    "AuditMixin",
    "User",
    "Table",
    "Product",
    "Order",
    "LineItem",
]
