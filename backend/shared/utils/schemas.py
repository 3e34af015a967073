"""
Shared Pydantic schemas used across the application.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from shared.config.constants import (
    KitchenFilter,
    LineItemStatus,
    Limits,
    OrderStatus,
    Roles,
    TableStatus,
    Urgency,
)


# =============================================================================
# Order Schemas
# =============================================================================


class LineItemInput(BaseModel):
    """Input for a single item of a new order."""

    product_id: int = Field(gt=0)
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class CreateOrderRequest(BaseModel):
    """Request to place a new order on a table."""

    table_id: int = Field(gt=0)
    items: list[LineItemInput] = Field(min_length=1)
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class LineItemOutput(BaseModel):
    """One ordered product with its own preparation status."""

    id: int
    product_id: int
    product_name: str
    category: str
    quantity: int
    unit_price_cents: int
    subtotal_cents: int
    notes: str | None = None
    status: LineItemStatus


class OrderOutput(BaseModel):
    """Order with its line items, in insertion order."""

    id: int
    table_id: int
    table_number: int
    staff_id: int
    staff_name: str
    status: OrderStatus
    preparation_status: OrderStatus | None = None
    started_at: datetime
    delivered_at: datetime | None = None
    total_cents: int
    payment_method: str | None = None
    notes: str | None = None
    items: list[LineItemOutput]


class UpdateOrderStatusRequest(BaseModel):
    """Request to move an order to a new status."""

    status: OrderStatus
    payment_method: str | None = Field(default=None, max_length=Limits.MAX_PAYMENT_METHOD_LENGTH)


class UpdateLineItemStatusRequest(BaseModel):
    """Request to move a single line item to a new status."""

    status: LineItemStatus


# =============================================================================
# Table Schemas
# =============================================================================


class TableOutput(BaseModel):
    """Physical table with occupancy and assignment."""

    id: int
    number: int
    capacity: int
    status: TableStatus
    assigned_staff_id: int | None = None
    assigned_staff_name: str | None = None
    open_orders: int = 0


class UpdateTableRequest(BaseModel):
    """
    Staff update of a table.

    Omitting status keeps the current one. Omitting staff_id keeps the
    current assignment; an explicit null clears it.
    """

    status: TableStatus | None = None
    staff_id: int | None = Field(default=None, gt=0)


# =============================================================================
# Staff Schemas
# =============================================================================


class StaffOutput(BaseModel):
    """Staff member as listed for table assignment."""

    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    display_name: str
    role: Roles


# =============================================================================
# Catalog / Inventory Schemas
# =============================================================================


class ProductOutput(BaseModel):
    """Product as seen by staff, including stock levels."""

    id: int
    name: str
    description: str | None = None
    category: str
    price_cents: int
    cost_cents: int
    stock_actual: int
    stock_minimo: int
    unit: str
    is_low_stock: bool = False


class StockAdjustmentRequest(BaseModel):
    """Manual stock correction: positive adds, negative removes."""

    delta: int = Field(ge=-Limits.MAX_STOCK_ADJUSTMENT, le=Limits.MAX_STOCK_ADJUSTMENT)
    reason: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class LowStockAlertOutput(BaseModel):
    """Product at or below its minimum stock."""

    product_id: int
    name: str
    category: str
    unit: str
    stock_actual: int
    stock_minimo: int
    ratio: float


# =============================================================================
# Kitchen Schemas
# =============================================================================


class KitchenItemOutput(BaseModel):
    """Line item still waiting on kitchen/bar work."""

    id: int
    product_id: int
    product_name: str
    category: str
    quantity: int
    notes: str | None = None
    status: LineItemStatus


class KitchenOrderOutput(BaseModel):
    """One order as shown on the kitchen/bar display."""

    order_id: int
    table_number: int
    staff_name: str
    started_at: datetime
    elapsed_minutes: int
    urgency: Urgency
    notes: str | None = None
    items: list[KitchenItemOutput]


class KitchenPendingOutput(BaseModel):
    """Kitchen view payload with the suggested polling interval."""

    category: KitchenFilter
    refresh_seconds: int
    generated_at: datetime
    orders: list[KitchenOrderOutput]


# =============================================================================
# Common
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None
