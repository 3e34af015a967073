"""
Table Service.

Staff-driven occupancy and assignment changes. The free -> occupied edge is
owned by order creation and the settlement release by order payment; both
live in OrderLedger so they share the order's transaction.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from shared.config.constants import SETTLED_ORDER_STATUSES, ErrorMessages, TableStatus
from shared.config.logging import tables_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    AppException,
    DatabaseError,
    InvalidTransitionError,
    NotFoundError,
    TableNotFoundError,
)
from shared.utils.schemas import TableOutput
from rest_api.models import Order, Table, User
from .state_machines import TABLE_ENTITY, validate_table_transition


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Distinguishes "leave assignment as is" from an explicit None (unassign)
UNSET = _Unset()


class TableService:
    """Domain service for table occupancy and staff assignment."""

    def __init__(self, db: Session):
        self._db = db

    def _unsettled_counts(self) -> dict[int, int]:
        rows = self._db.execute(
            select(Order.table_id, func.count(Order.id))
            .where(
                Order.is_active.is_(True),
                Order.status.not_in(list(SETTLED_ORDER_STATUSES)),
            )
            .group_by(Order.table_id)
        ).all()
        return {table_id: count for table_id, count in rows}

    def to_output(self, table: Table, open_orders: int | None = None) -> TableOutput:
        if open_orders is None:
            open_orders = self._unsettled_counts().get(table.id, 0)
        return TableOutput(
            id=table.id,
            number=table.number,
            capacity=table.capacity,
            status=table.status,
            assigned_staff_id=table.assigned_staff_id,
            assigned_staff_name=table.assigned_staff.display_name if table.assigned_staff else None,
            open_orders=open_orders,
        )

    def list_tables(self) -> list[TableOutput]:
        """All active tables by number, with their count of unsettled orders."""
        tables = self._db.scalars(
            select(Table)
            .where(Table.is_active.is_(True))
            .options(joinedload(Table.assigned_staff))
            .order_by(Table.number)
        ).all()
        counts = self._unsettled_counts()
        return [self.to_output(t, counts.get(t.id, 0)) for t in tables]

    def get_table(self, table_id: int) -> Table:
        table = self._db.scalar(
            select(Table).where(Table.id == table_id, Table.is_active.is_(True))
        )
        if table is None:
            raise TableNotFoundError(table_id)
        return table

    def update_table(
        self,
        table_id: int,
        new_status: TableStatus | None = None,
        staff_id: int | None | _Unset = UNSET,
    ) -> tuple[Table, bool]:
        """
        Change a table's status and/or assigned staff.

        new_status=None keeps the status; staff_id=UNSET keeps the
        assignment, staff_id=None clears it. Releasing a table to free is
        refused while any unsettled order still references it.

        Returns (table, status_changed).
        """
        try:
            table = self._db.scalar(
                select(Table)
                .where(Table.id == table_id, Table.is_active.is_(True))
                .with_for_update()
            )
            if table is None:
                raise TableNotFoundError(table_id)

            previous = table.status
            target = TableStatus(new_status) if new_status is not None else previous
            validate_table_transition(previous, target)

            if target == TableStatus.FREE and previous != TableStatus.FREE:
                open_orders = self._unsettled_counts().get(table.id, 0)
                if open_orders:
                    raise InvalidTransitionError(
                        TABLE_ENTITY,
                        previous.value,
                        target.value,
                        reason=ErrorMessages.TABLE_HAS_OPEN_ORDERS,
                        table_id=table_id,
                        open_orders=open_orders,
                    )

            if not isinstance(staff_id, _Unset):
                if staff_id is not None:
                    staff = self._db.get(User, staff_id)
                    if staff is None or not staff.is_active:
                        raise NotFoundError("Usuario", staff_id)
                table.assigned_staff_id = staff_id

            table.status = target
            table.touch()
            safe_commit(self._db)
        except AppException:
            self._db.rollback()
            raise
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("la actualización de la mesa", table_id=table_id, error=str(e))

        logger.info(
            "Table updated",
            table_id=table_id,
            from_status=previous.value,
            to_status=target.value,
            assigned_staff_id=table.assigned_staff_id,
        )
        return table, target != previous
