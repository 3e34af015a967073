"""
Kitchen Queue Projection.

Read-only view of the work still waiting on kitchen and bar staff. It is
recomputed from a single query on every poll and never writes.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from shared.config.constants import (
    OUTSTANDING_ITEM_STATUSES,
    SETTLED_ORDER_STATUSES,
    KitchenFilter,
    LineItemStatus,
    Urgency,
)
from shared.config.logging import kitchen_logger as logger
from shared.config.settings import settings
from shared.utils.schemas import KitchenItemOutput, KitchenOrderOutput
from rest_api.models import LineItem, Order


def elapsed_minutes(started_at: datetime, now: datetime) -> int:
    """
    Whole minutes since started_at, floored and never negative.

    Naive datetimes (SQLite drops tzinfo) are read as UTC.
    """
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    seconds = (now - started_at).total_seconds()
    return max(0, math.floor(seconds / 60))


def classify_urgency(
    minutes: int,
    warning_minutes: int | None = None,
    danger_minutes: int | None = None,
) -> Urgency:
    """<warning normal, warning..danger-1 warning, >=danger danger."""
    if warning_minutes is None:
        warning_minutes = settings.kitchen_warning_minutes
    if danger_minutes is None:
        danger_minutes = settings.kitchen_danger_minutes
    if minutes >= danger_minutes:
        return Urgency.DANGER
    if minutes >= warning_minutes:
        return Urgency.WARNING
    return Urgency.NORMAL


def matches_filter(category: str, kitchen_filter: KitchenFilter, food_category: str) -> bool:
    """food = the kitchen category tag, drink = everything else."""
    if kitchen_filter == KitchenFilter.FOOD:
        return category == food_category
    if kitchen_filter == KitchenFilter.DRINK:
        return category != food_category
    return True


@dataclass
class KitchenEntry:
    order_id: int
    table_number: int
    staff_name: str
    started_at: datetime
    elapsed_minutes: int
    urgency: Urgency
    notes: str | None = None
    items: list[LineItem] = field(default_factory=list)

    def to_output(self) -> KitchenOrderOutput:
        return KitchenOrderOutput(
            order_id=self.order_id,
            table_number=self.table_number,
            staff_name=self.staff_name,
            started_at=self.started_at,
            elapsed_minutes=self.elapsed_minutes,
            urgency=self.urgency,
            notes=self.notes,
            items=[
                KitchenItemOutput(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product.name,
                    category=item.product.category,
                    quantity=item.quantity,
                    notes=item.notes,
                    status=item.status,
                )
                for item in self.items
            ],
        )


class KitchenQueueProjection:
    """Outstanding line items grouped by order, oldest order first."""

    def __init__(self, db: Session, food_category: str | None = None):
        self._db = db
        self._food_category = food_category or settings.kitchen_food_category

    def pending_work(
        self,
        kitchen_filter: KitchenFilter = KitchenFilter.ALL,
        now: datetime | None = None,
    ) -> list[KitchenEntry]:
        kitchen_filter = KitchenFilter(kitchen_filter)
        now = now or datetime.now(timezone.utc)

        orders = self._db.scalars(
            select(Order)
            .where(
                Order.is_active.is_(True),
                Order.status.not_in(list(SETTLED_ORDER_STATUSES)),
            )
            .options(
                joinedload(Order.table),
                joinedload(Order.staff),
                selectinload(Order.items).joinedload(LineItem.product),
            )
            .order_by(Order.started_at.asc(), Order.id.asc())
        ).unique().all()

        entries = []
        for order in orders:
            items = [
                item
                for item in order.items
                if item.status in OUTSTANDING_ITEM_STATUSES
                and matches_filter(item.product.category, kitchen_filter, self._food_category)
            ]
            if not items:
                continue

            minutes = elapsed_minutes(order.started_at, now)
            entries.append(
                KitchenEntry(
                    order_id=order.id,
                    table_number=order.table.number,
                    staff_name=order.staff.display_name,
                    started_at=order.started_at,
                    elapsed_minutes=minutes,
                    urgency=classify_urgency(minutes),
                    notes=order.notes,
                    items=items,
                )
            )

        logger.debug(
            "Kitchen queue computed",
            category=kitchen_filter.value,
            orders=len(entries),
            items=sum(len(e.items) for e in entries),
        )
        return entries

    def counts_by_status(self, entries: list[KitchenEntry]) -> dict[LineItemStatus, int]:
        counts = {status: 0 for status in OUTSTANDING_ITEM_STATUSES}
        for entry in entries:
            for item in entry.items:
                counts[item.status] += 1
        return counts
