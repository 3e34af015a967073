"""
Seed data for development and testing.
Creates minimal initial data: staff, tables and a small product catalog.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.constants import Roles, TableStatus
from shared.config.logging import get_logger
from shared.config.settings import settings
from rest_api.models import Product, Table, User

logger = get_logger(__name__)


# =============================================================================
# Constants for seed data
# =============================================================================

SEED_TABLE_COUNT = 20
SEED_TABLE_CAPACITY = 4

SEED_STAFF = [
    {"username": "admin", "first_name": "Admin", "last_name": "Sistema", "role": Roles.ADMIN},
    {"username": "mesero1", "first_name": "Juan", "last_name": "Pérez", "role": Roles.WAITER},
    {"username": "mesero2", "first_name": "Ana", "last_name": "Gómez", "role": Roles.WAITER},
    {"username": "cocinero", "first_name": "María", "last_name": "López", "role": Roles.COOK},
]

SEED_PRODUCTS = [
    {
        "name": "Cerveza",
        "description": "Cerveza rubia 500 ml",
        "category": "Bebida",
        "price_cents": 500,
        "cost_cents": 250,
        "stock_actual": 100,
        "unit": "botella",
    },
    {
        "name": "Agua Mineral",
        "description": "Agua sin gas 500 ml",
        "category": "Bebida",
        "price_cents": 200,
        "cost_cents": 80,
        "stock_actual": 100,
        "unit": "botella",
    },
    {
        "name": "Refresco",
        "description": "Gaseosa 350 ml",
        "category": "Bebida",
        "price_cents": 300,
        "cost_cents": 120,
        "stock_actual": 100,
        "unit": "lata",
    },
    {
        "name": "Hamburguesa",
        "description": "Hamburguesa completa con papas",
        "category": "Plato",
        "price_cents": 1500,
        "cost_cents": 700,
        "stock_actual": 50,
        "unit": "unidad",
    },
    {
        "name": "Pizza",
        "description": "Pizza muzzarella mediana",
        "category": "Plato",
        "price_cents": 1800,
        "cost_cents": 800,
        "stock_actual": 50,
        "unit": "unidad",
    },
]


def seed_staff(db: Session) -> None:
    existing = set(db.scalars(select(User.username)).all())
    for data in SEED_STAFF:
        if data["username"] not in existing:
            db.add(User(**data))


def seed_tables(db: Session) -> None:
    existing = set(db.scalars(select(Table.number)).all())
    for number in range(1, SEED_TABLE_COUNT + 1):
        if number not in existing:
            db.add(
                Table(
                    number=number,
                    capacity=SEED_TABLE_CAPACITY,
                    status=TableStatus.FREE,
                )
            )


def seed_products(db: Session) -> None:
    existing = set(db.scalars(select(Product.name)).all())
    for data in SEED_PRODUCTS:
        if data["name"] not in existing:
            db.add(Product(stock_minimo=settings.default_stock_minimo, **data))


def seed(db: Session) -> None:
    """
    Seed the database with initial data.
    Idempotent: only inserts rows that don't exist yet.
    """
    if db.scalar(select(User.id).limit(1)) and db.scalar(select(Product.id).limit(1)):
        logger.info("Database already seeded, skipping")
        return

    logger.info("Seeding database")
    seed_staff(db)
    seed_tables(db)
    seed_products(db)
    db.commit()
    logger.info(
        "Database seeded",
        staff=len(SEED_STAFF),
        tables=SEED_TABLE_COUNT,
        products=len(SEED_PRODUCTS),
    )
