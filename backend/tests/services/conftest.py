"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session, so routes run the
      real SQL services end to end
    - Factories insert rows with sensible defaults; tests override what they assert on

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service tests
      (PostgreSQL-specific features not exercised here)
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import get_db
from app.main import app
from app.models import Address, Category, MenuItem, Offer, Order, User

_sequence = count(1)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def add_user(test_db):
    async def _add(**overrides) -> User:
        n = next(_sequence)
        values = dict(external_id=f"user_{n}", email=f"user{n}@example.com")
        values.update(overrides)
        user = User(**values)
        test_db.add(user)
        await test_db.commit()
        return user
    return _add


@pytest.fixture
def add_category(test_db):
    async def _add(**overrides) -> Category:
        n = next(_sequence)
        values = dict(name=f"Category {n}", slug=f"category-{n}")
        values.update(overrides)
        category = Category(**values)
        test_db.add(category)
        await test_db.commit()
        return category
    return _add


@pytest.fixture
def add_item(test_db, add_category):
    async def _add(category: Category | None = None, **overrides) -> MenuItem:
        category = category or await add_category()
        values = dict(name="Dal Makhani", price=Decimal("199.00"), category_id=category.id)
        values.update(overrides)
        item = MenuItem(**values)
        test_db.add(item)
        await test_db.commit()
        return item
    return _add


@pytest.fixture
def add_order(test_db):
    async def _add(user: User, total: str = "100.00", **overrides) -> Order:
        values = dict(
            order_number=f"ORD-{next(_sequence):05d}",
            user_id=user.id,
            subtotal=Decimal(total),
            total=Decimal(total),
        )
        values.update(overrides)
        order = Order(**values)
        test_db.add(order)
        await test_db.commit()
        return order
    return _add


@pytest.fixture
def add_address(test_db):
    async def _add(user: User, **overrides) -> Address:
        values = dict(
            user_id=user.id, address_line1="12 MG Road", city="Bengaluru",
            state="Karnataka", postal_code="560001",
        )
        values.update(overrides)
        address = Address(**values)
        test_db.add(address)
        await test_db.commit()
        return address
    return _add


@pytest.fixture
def add_offer(test_db, now):
    async def _add(**overrides) -> Offer:
        values = dict(
            title="Festive Offer",
            description="Save on your order",
            type="popup",
            discount_type="percentage",
            discount_value=Decimal("20.00"),
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
        values.update(overrides)
        offer = Offer(**values)
        test_db.add(offer)
        await test_db.commit()
        return offer
    return _add
