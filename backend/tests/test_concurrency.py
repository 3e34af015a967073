"""
Concurrent order placement against shared stock.

Uses a file-backed SQLite database so every thread gets its own connection;
the guarded decrement must never let stock go below zero.
"""

import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from shared.config.constants import Roles, TableStatus
from shared.utils.exceptions import InsufficientStockError
from shared.utils.schemas import LineItemInput
from rest_api.models import Base, Order, Product, Table, User
from rest_api.services.domain import OrderLedger


PRODUCT_ID = 1
WAITER_ID = 1


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'floor.db'}",
        connect_args={"timeout": 30, "check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    with factory() as db:
        db.add(User(id=WAITER_ID, username="mesero", role=Roles.WAITER))
        db.add_all(
            Table(id=n, number=n, capacity=4, status=TableStatus.FREE) for n in range(1, 11)
        )
        db.add(
            Product(
                id=PRODUCT_ID,
                name="Empanada",
                category="Plato",
                price_cents=400,
                stock_actual=5,
                stock_minimo=1,
            )
        )
        db.commit()

    yield factory
    engine.dispose()


def _place_concurrently(factory, table_ids: list[int], quantity: int):
    """Start one order per table at the same moment; collect outcomes."""
    barrier = threading.Barrier(len(table_ids))
    results: list[object] = []
    lock = threading.Lock()

    def worker(table_id: int) -> None:
        with factory() as db:
            barrier.wait()
            try:
                order, _ = OrderLedger(db).create_order(
                    table_id,
                    WAITER_ID,
                    [LineItemInput(product_id=PRODUCT_ID, quantity=quantity)],
                )
                outcome: object = order.id
            except InsufficientStockError as e:
                outcome = e
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(t,)) for t in table_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results


def _final_stock(factory) -> int:
    with factory() as db:
        return db.get(Product, PRODUCT_ID).stock_actual


def test_two_orders_cannot_oversell(file_session_factory):
    results = _place_concurrently(file_session_factory, [1, 2], quantity=3)

    failures = [r for r in results if isinstance(r, InsufficientStockError)]
    successes = [r for r in results if isinstance(r, int)]

    assert len(successes) == 1
    assert len(failures) == 1
    assert failures[0].available == 2
    assert _final_stock(file_session_factory) == 2

    with file_session_factory() as db:
        assert db.query(Order).count() == 1


def test_many_single_unit_orders_drain_stock_exactly(file_session_factory):
    results = _place_concurrently(file_session_factory, list(range(1, 9)), quantity=1)

    successes = [r for r in results if isinstance(r, int)]

    assert len(results) == 8
    assert len(successes) == 5
    assert _final_stock(file_session_factory) == 0
