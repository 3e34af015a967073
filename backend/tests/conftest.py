"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time: point everything at throwaway
# resources before the application modules load.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("EVENTS_ENABLED", "false")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.config.constants import Roles, TableStatus
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt
from rest_api.main import app
from rest_api.models import Base, Product, Table, User


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Fixed ids so scenarios read like the floor they describe
ADMIN_ID = 1
WAITER_ID = 2
COOK_ID = 3

BURGER_ID = 10
BEER_ID = 11
PIZZA_ID = 12


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Seed fixtures
# =============================================================================


@pytest.fixture
def seed_staff(db_session):
    """Admin, waiter and cook."""
    users = [
        User(id=ADMIN_ID, username="admin", first_name="Admin", last_name="Sistema", role=Roles.ADMIN),
        User(id=WAITER_ID, username="mesero", first_name="Juan", last_name="Pérez", role=Roles.WAITER),
        User(id=COOK_ID, username="cocinero", first_name="María", last_name="López", role=Roles.COOK),
    ]
    db_session.add_all(users)
    db_session.commit()
    return {user.role: user for user in users}


@pytest.fixture
def seed_tables(db_session):
    """Three free tables, numbered like their ids."""
    tables = [
        Table(id=n, number=n, capacity=4, status=TableStatus.FREE)
        for n in (1, 2, 3)
    ]
    db_session.add_all(tables)
    db_session.commit()
    return {table.id: table for table in tables}


@pytest.fixture
def seed_products(db_session):
    """
    Two kitchen products and one bar product.

    Pizza starts below its minimum so low-stock listings are never empty.
    """
    products = [
        Product(
            id=BURGER_ID,
            name="Hamburguesa",
            category="Plato",
            price_cents=1500,
            cost_cents=700,
            stock_actual=20,
            stock_minimo=5,
        ),
        Product(
            id=BEER_ID,
            name="Cerveza",
            category="Bebida",
            price_cents=500,
            cost_cents=250,
            stock_actual=50,
            stock_minimo=5,
            unit="botella",
        ),
        Product(
            id=PIZZA_ID,
            name="Pizza",
            category="Plato",
            price_cents=1800,
            cost_cents=800,
            stock_actual=3,
            stock_minimo=5,
        ),
    ]
    db_session.add_all(products)
    db_session.commit()
    return {product.id: product for product in products}


@pytest.fixture
def floor(seed_staff, seed_tables, seed_products):
    """Staff, tables and products together."""
    return {"staff": seed_staff, "tables": seed_tables, "products": seed_products}


# =============================================================================
# Auth fixtures
# =============================================================================


def make_auth_headers(user_id: int, *roles: Roles) -> dict[str, str]:
    token = sign_jwt({"sub": str(user_id), "roles": [role.value for role in roles]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(seed_staff):
    return make_auth_headers(ADMIN_ID, Roles.ADMIN)


@pytest.fixture
def waiter_headers(seed_staff):
    return make_auth_headers(WAITER_ID, Roles.WAITER)


@pytest.fixture
def cook_headers(seed_staff):
    return make_auth_headers(COOK_ID, Roles.COOK)
