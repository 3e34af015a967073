"""
Utilities module: Exceptions and schemas.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    TableNotFoundError,
    OrderNotFoundError,
    LineItemNotFoundError,
    ForbiddenError,
    InsufficientRoleError,
    ValidationError,
    ProductNotFoundError,
    InsufficientStockError,
    InvalidTransitionError,
    InternalError,
    DatabaseError,
)
from shared.utils.schemas import ErrorResponse

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "TableNotFoundError",
    "OrderNotFoundError",
    "LineItemNotFoundError",
    "ForbiddenError",
    "InsufficientRoleError",
    "ValidationError",
    "ProductNotFoundError",
    "InsufficientStockError",
    "InvalidTransitionError",
    "InternalError",
    "DatabaseError",
    # schemas
    "ErrorResponse",
]
