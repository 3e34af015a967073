"""
Order Ledger.

Owns the order lifecycle: the creation transaction against the stock
ledger, explicit order status changes, and line item progress.

Order.status is set by staff only. The aggregate computed from line items
(derive_order_status) is reported as preparation_status and never written.
"""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from shared.config.constants import (
    CANCELLABLE_ITEM_STATUSES,
    SETTLED_ORDER_STATUSES,
    ErrorMessages,
    LineItemStatus,
    OrderStatus,
    TableStatus,
)
from shared.config.logging import orders_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    AppException,
    DatabaseError,
    InvalidTransitionError,
    LineItemNotFoundError,
    NotFoundError,
    OrderNotFoundError,
    ProductNotFoundError,
    TableNotFoundError,
    ValidationError,
)
from shared.utils.schemas import LineItemInput, LineItemOutput, OrderOutput
from rest_api.models import LineItem, Order, Table, User
from rest_api.models.base import utcnow
from .state_machines import (
    LINE_ITEM_ENTITY,
    derive_order_status,
    validate_line_item_transition,
    validate_order_transition,
)
from .stock_ledger import StockLedger


def build_line_item_output(item: LineItem) -> LineItemOutput:
    return LineItemOutput(
        id=item.id,
        product_id=item.product_id,
        product_name=item.product.name,
        category=item.product.category,
        quantity=item.quantity,
        unit_price_cents=item.unit_price_cents,
        subtotal_cents=item.subtotal_cents,
        notes=item.notes,
        status=item.status,
    )


def build_order_output(order: Order) -> OrderOutput:
    """Serialize an order loaded with _order_load_options()."""
    return OrderOutput(
        id=order.id,
        table_id=order.table_id,
        table_number=order.table.number,
        staff_id=order.staff_id,
        staff_name=order.staff.display_name,
        status=order.status,
        preparation_status=derive_order_status(item.status for item in order.items),
        started_at=order.started_at,
        delivered_at=order.delivered_at,
        total_cents=order.total_cents,
        payment_method=order.payment_method,
        notes=order.notes,
        items=[build_line_item_output(item) for item in order.items],
    )


def _order_load_options():
    return (
        joinedload(Order.table),
        joinedload(Order.staff),
        selectinload(Order.items).joinedload(LineItem.product),
    )


class OrderLedger:
    """
    Domain service for Order operations.

    Every public mutator is one unit of work: it commits on success and
    rolls back everything (stock included) on any failure.
    """

    def __init__(self, db: Session, stock: StockLedger | None = None):
        self._db = db
        self._stock = stock or StockLedger(db)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        order = self._db.scalar(
            select(Order)
            .where(Order.id == order_id, Order.is_active.is_(True))
            .options(*_order_load_options())
        )
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def list_orders(self, status: OrderStatus | None = None) -> list[Order]:
        """Orders newest first, optionally filtered by status."""
        stmt = (
            select(Order)
            .where(Order.is_active.is_(True))
            .options(*_order_load_options())
            .order_by(Order.started_at.desc(), Order.id.desc())
        )
        if status is not None:
            stmt = stmt.where(Order.status == OrderStatus(status))
        return list(self._db.scalars(stmt).unique().all())

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_order(
        self,
        table_id: int,
        staff_id: int,
        items: Sequence[LineItemInput],
        notes: str | None = None,
    ) -> tuple[Order, Table | None]:
        """
        Place an order against live stock in one transaction.

        Products are locked in ascending id order, then reserved in request
        order; the first failure aborts the whole order and names the
        offending product. On success the table goes free -> occupied.

        Returns (order, table) where table is set only if it was opened by
        this order.

        Raises:
            TableNotFoundError, ProductNotFoundError, InsufficientStockError,
            ValidationError, DatabaseError
        """
        if not items:
            raise ValidationError("El pedido debe tener al menos un ítem", table_id=table_id)

        try:
            table = self._db.scalar(
                select(Table)
                .where(Table.id == table_id, Table.is_active.is_(True))
                .with_for_update()
            )
            if table is None:
                raise TableNotFoundError(table_id)

            if self._db.get(User, staff_id) is None:
                raise NotFoundError("Usuario", staff_id)

            products = self._stock.lock_products(item.product_id for item in items)

            line_items = []
            for item in items:
                if item.product_id not in products:
                    raise ProductNotFoundError(item.product_id)
                product = self._stock.reserve(item.product_id, item.quantity)
                line_items.append(
                    LineItem(
                        product_id=product.id,
                        quantity=item.quantity,
                        unit_price_cents=product.price_cents,
                        notes=item.notes,
                        status=LineItemStatus.PENDING,
                    )
                )

            order = Order(
                table_id=table.id,
                staff_id=staff_id,
                status=OrderStatus.PENDING,
                started_at=utcnow(),
                notes=notes,
                items=line_items,
            )
            order.recompute_total()
            self._db.add(order)

            opened_table = None
            if table.status == TableStatus.FREE:
                table.status = TableStatus.OCCUPIED
                table.touch()
                opened_table = table

            safe_commit(self._db)
        except AppException:
            self._db.rollback()
            raise
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("la creación del pedido", table_id=table_id, error=str(e))

        logger.info(
            "Order created",
            order_id=order.id,
            table_id=table_id,
            staff_id=staff_id,
            items_count=len(line_items),
            total_cents=order.total_cents,
            table_opened=opened_table is not None,
        )
        return self.get_order(order.id), opened_table

    # -------------------------------------------------------------------------
    # Order status
    # -------------------------------------------------------------------------

    def _lock_order(self, order_id: int) -> Order:
        order = self._db.scalar(
            select(Order)
            .where(Order.id == order_id, Order.is_active.is_(True))
            .with_for_update()
        )
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _has_other_unsettled_orders(self, table_id: int, order_id: int) -> bool:
        count = self._db.scalar(
            select(func.count())
            .select_from(Order)
            .where(
                Order.table_id == table_id,
                Order.id != order_id,
                Order.is_active.is_(True),
                Order.status.not_in(list(SETTLED_ORDER_STATUSES)),
            )
        )
        return bool(count)

    def _cancel_item(self, item: LineItem) -> None:
        """Cancel one line item and return its stock. Caller recomputes the total."""
        validate_line_item_transition(item.status, LineItemStatus.CANCELLED)
        item.status = LineItemStatus.CANCELLED
        item.touch()
        self._stock.release(item.product_id, item.quantity)

    def update_order_status(
        self,
        order_id: int,
        new_status: OrderStatus,
        payment_method: str | None = None,
    ) -> tuple[Order, Table | None]:
        """
        Move an order to new_status.

        - delivered stamps delivered_at
        - paid stores payment_method and, in the same transaction, frees the
          table when no other unsettled order remains on it
        - cancelled cancels every still-cancellable line item, returns its
          stock and recomputes the total; the table is left as is

        Returns (order, table) where table is set only if its status changed.
        """
        new_status = OrderStatus(new_status)
        released_table = None
        try:
            order = self._lock_order(order_id)
            previous = order.status
            validate_order_transition(order.status, new_status)

            if new_status == OrderStatus.DELIVERED:
                order.delivered_at = utcnow()

            elif new_status == OrderStatus.PAID:
                if payment_method:
                    order.payment_method = payment_method
                table = self._db.scalar(
                    select(Table).where(Table.id == order.table_id).with_for_update()
                )
                if (
                    table is not None
                    and table.status != TableStatus.FREE
                    and not self._has_other_unsettled_orders(table.id, order.id)
                ):
                    table.status = TableStatus.FREE
                    table.touch()
                    released_table = table

            elif new_status == OrderStatus.CANCELLED:
                for item in order.items:
                    if item.status in CANCELLABLE_ITEM_STATUSES:
                        self._cancel_item(item)
                order.recompute_total()

            order.status = new_status
            order.touch()
            safe_commit(self._db)
        except AppException:
            self._db.rollback()
            raise
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("la actualización del pedido", order_id=order_id, error=str(e))

        logger.info(
            "Order status updated",
            order_id=order_id,
            from_status=previous.value,
            to_status=new_status.value,
            table_released=released_table is not None,
        )
        return self.get_order(order_id), released_table

    # -------------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------------

    def update_line_item_status(
        self,
        order_id: int,
        line_item_id: int,
        new_status: LineItemStatus,
    ) -> LineItem:
        """
        Move one line item along its pipeline.

        Cancelling returns the item's stock and recomputes the order total
        in the same transaction. Invalid edges change nothing, and items of
        a paid or cancelled order are frozen.
        """
        new_status = LineItemStatus(new_status)
        try:
            order = self._lock_order(order_id)
            item = self._db.scalar(
                select(LineItem)
                .where(LineItem.id == line_item_id, LineItem.order_id == order.id)
                .with_for_update()
            )
            if item is None:
                raise LineItemNotFoundError(line_item_id, order_id=order_id)
            if order.status in SETTLED_ORDER_STATUSES:
                raise InvalidTransitionError(
                    LINE_ITEM_ENTITY,
                    item.status.value,
                    new_status.value,
                    reason=ErrorMessages.ORDER_SETTLED,
                    order_id=order_id,
                    order_status=order.status.value,
                )

            previous = item.status
            if new_status == LineItemStatus.CANCELLED:
                self._cancel_item(item)
                order.recompute_total()
                order.touch()
            else:
                validate_line_item_transition(item.status, new_status)
                item.status = new_status
                item.touch()

            safe_commit(self._db)
        except AppException:
            self._db.rollback()
            raise
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError(
                "la actualización del ítem", order_id=order_id, line_item_id=line_item_id, error=str(e)
            )

        logger.info(
            "Line item status updated",
            order_id=order_id,
            line_item_id=line_item_id,
            from_status=previous.value,
            to_status=new_status.value,
        )
        self._db.refresh(item)
        return item
