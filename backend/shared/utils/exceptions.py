"""
Centralized HTTP exceptions for consistent error handling.

Domain services raise these directly; FastAPI renders them as
{"detail": "..."} with the matching status code.

Usage:
    from shared.utils.exceptions import OrderNotFoundError, InsufficientStockError

    raise OrderNotFoundError(order_id)
    raise InsufficientStockError(product_id, product.name, requested=3, available=2)
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Producto", 123)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} con ID {entity_id} no encontrado"
        else:
            detail = f"{entity} no encontrado"

        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class TableNotFoundError(NotFoundError):
    """Physical table not found."""

    def __init__(self, table_id: int | None = None, **log_context: Any):
        super().__init__("Mesa", table_id, **log_context)


class OrderNotFoundError(NotFoundError):
    """Order not found."""

    def __init__(self, order_id: int | None = None, **log_context: Any):
        super().__init__("Pedido", order_id, **log_context)


class LineItemNotFoundError(NotFoundError):
    """Line item not found, or not part of the given order."""

    def __init__(self, line_item_id: int | None = None, **log_context: Any):
        super().__init__("Ítem de pedido", line_item_id, **log_context)


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("ajustar stock")
    """

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"No autorizado para {action}"
        else:
            detail = "Acceso denegado"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            action=action,
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    """Caller doesn't hold any of the required roles."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        self.required_roles = list(required_roles)
        roles_str = ", ".join(sorted(self.required_roles))
        super().__init__(
            f"realizar esta acción (requiere rol: {roles_str})",
            required_roles=self.required_roles,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("El pedido debe tener al menos un ítem")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class ProductNotFoundError(ValidationError):
    """
    Unknown product referenced by a request payload.

    Reported as 400 rather than 404: the resource addressed by the URL
    exists, it is the payload that is wrong.
    """

    def __init__(self, product_id: int, **log_context: Any):
        self.product_id = product_id
        super().__init__(
            f"Producto con ID {product_id} no encontrado",
            product_id=product_id,
            **log_context,
        )


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the product's current stock."""

    def __init__(
        self,
        product_id: int,
        product_name: str,
        requested: int,
        available: int,
        **log_context: Any,
    ):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Stock insuficiente para {product_name}: "
            f"solicitado {requested}, disponible {available}",
            product_id=product_id,
            requested=requested,
            available=available,
            **log_context,
        )


class InvalidTransitionError(ValidationError):
    """Invalid status transition. Nothing is mutated when this is raised."""

    def __init__(
        self,
        entity: str,
        from_status: str,
        to_status: str,
        reason: str | None = None,
        **log_context: Any,
    ):
        self.entity = entity
        self.from_status = from_status
        self.to_status = to_status
        detail = f"Transición inválida de '{from_status}' a '{to_status}' para {entity}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail, entity=entity, from_status=from_status, to_status=to_status, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """Internal server error (500)."""

    def __init__(self, detail: str = "Error interno del servidor", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """
    Store failure (connection lost, constraint surprise, deadlock).

    The transaction has been rolled back; callers may retry.
    """

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Error de base de datos durante {operation}. Por favor intente de nuevo."
        super().__init__(detail, operation=operation, **log_context)
