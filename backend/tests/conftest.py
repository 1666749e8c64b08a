"""Shared test fixtures for all test modules."""

import contextlib
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import promotions.models  # noqa: F401
from promotions.core import database as db_module
from promotions.core.auth import DISCOUNTS_MANAGE, DISCOUNTS_VIEW, create_access_token
from promotions.core.database import Base, enable_sqlite_foreign_keys, get_db
from promotions.main import app
from promotions.models.catalog import Category, Product, ProductVariant
from promotions.models.discount import Discount
from promotions.models.order import Order, OrderItem
from promotions.repositories.usage_repository import UsageRepository

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(_test_engine)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()
        conn.execute(text("PRAGMA foreign_keys = ON"))

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def manager_headers():
    """Bearer token allowed to view and manage discounts."""
    token = create_access_token("admin-1", [DISCOUNTS_VIEW, DISCOUNTS_MANAGE])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers():
    """Bearer token allowed to view discounts only."""
    token = create_access_token("viewer-1", [DISCOUNTS_VIEW])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_product(db_session):
    """Create a catalog product, optionally with a variant."""

    def _make(price="25.00", variant_price=None, category=None, name="Tee"):
        product = Product(
            name=name,
            price=Decimal(price),
            category_id=category.id if category else None,
        )
        db_session.add(product)
        db_session.flush()
        variant = None
        if variant_price is not None:
            variant = ProductVariant(
                product_id=product.id, name=f"{name} / L", price=Decimal(variant_price)
            )
            db_session.add(variant)
        db_session.commit()
        return product, variant

    return _make


@pytest.fixture
def make_category(db_session):
    def _make(name="Shirts"):
        category = Category(name=name)
        db_session.add(category)
        db_session.commit()
        return category

    return _make


@pytest.fixture
def make_discount(db_session):
    """Insert a discount row directly, bypassing rule validation."""

    def _make(**fields):
        values = {
            "name": "Test discount",
            "type": "percentage",
            "value": Decimal("10.00"),
            "scope": "all",
            "status": "active",
            "is_automatic": False,
        }
        values.update(fields)
        discount = Discount(**values)
        db_session.add(discount)
        db_session.commit()
        db_session.refresh(discount)
        return discount

    return _make


@pytest.fixture
def make_order(db_session):
    """Create an order with items.

    ``items`` is a list of ``(product, variant, quantity, unit_price)`` tuples.
    """
    counter = {"n": 0}

    def _make(items=(), total="0.00", email="shopper@example.com", currency="CAD"):
        counter["n"] += 1
        order = Order(
            order_number=f"ORD-{counter['n']:04d}",
            customer_email=email,
            total_amount=Decimal(total),
            currency=currency,
        )
        db_session.add(order)
        db_session.flush()
        lines = []
        for product, variant, quantity, unit_price in items:
            unit = Decimal(unit_price)
            line = OrderItem(
                order_id=order.id,
                product_id=product.id if product else None,
                variant_id=variant.id if variant else None,
                quantity=quantity,
                unit_price=unit,
                total_price=unit * quantity,
            )
            db_session.add(line)
            lines.append(line)
        db_session.commit()
        return order, lines

    return _make


@pytest.fixture
def record_usage(db_session):
    """Write an order-level ledger row."""

    def _record(order, discount, amount="0.00", created_at: datetime | None = None, code=None):
        return UsageRepository(db_session).record_order_discount(
            order.id, discount.id, Decimal(amount), code=code, created_at=created_at
        )

    return _record


@pytest.fixture
def record_item_usage(db_session):
    """Write an item-level ledger row."""

    def _record(order_item, discount, amount, created_at: datetime | None = None):
        return UsageRepository(db_session).record_order_item_discount(
            order_item.id, discount.id, Decimal(amount), created_at=created_at
        )

    return _record
