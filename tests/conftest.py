"""
Dofus Retro Tracker - Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- In-memory database session (aiosqlite)
- Seeded categories / items / prices
- FastAPI app wired to the test session
- DTO factories for client-side tests
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.app import create_app
from src.api.dependencies import get_session
from src.models import Base, Item, PriceEntry, SubCategory
from src.schemas import CategoryDTO, ItemDTO, PriceEntryDTO


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

pytest_plugins = ("pytest_asyncio",)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session on a fresh in-memory SQLite database.

    Foreign keys are enforced so ON DELETE rules behave like Postgres.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def now() -> datetime:
    """Fixed 'now' for seeded timestamps."""
    return datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def seeded(db_session: AsyncSession, now: datetime) -> dict[str, Any]:
    """
    Two categories, five items, price history for Wheat.

    The returned entities are detached; re-query them to work with the session.

    Layout:
        Cereals (dofus_id 48): Wheat, Barley, unnamed item 999
        Ores    (dofus_id 39): Iron Ore
        No category:           Wheat Bread (gid 1000)
        Wheat prices: 3 days ago, 1 day ago, today (quantity 1/10/1)
    """
    cereals = SubCategory(dofus_id=48, name="Cereals")
    ores = SubCategory(dofus_id=39, name="Ores")
    db_session.add_all([cereals, ores])
    await db_session.flush()

    wheat = Item(item_gid=289, item_name="Wheat", sub_category_id=cereals.id)
    barley = Item(item_gid=400, item_name="Barley", sub_category_id=cereals.id)
    iron = Item(item_gid=312, item_name="Iron Ore", sub_category_id=ores.id)
    unnamed = Item(item_gid=999, item_name=None, sub_category_id=cereals.id)
    loose = Item(item_gid=1000, item_name="Wheat Bread", sub_category_id=None)
    db_session.add_all([wheat, barley, iron, unnamed, loose])
    await db_session.flush()

    prices = [
        PriceEntry(item_id=wheat.id, price=1200, quantity=1, created_at=now - timedelta(days=3)),
        PriceEntry(item_id=wheat.id, price=11000, quantity=10, created_at=now - timedelta(days=1)),
        PriceEntry(item_id=wheat.id, price=1000, quantity=1, created_at=now),
    ]
    db_session.add_all(prices)
    await db_session.commit()

    # Tests see a clean identity map, like a new request would
    db_session.expunge_all()

    return {
        "cereals": cereals,
        "ores": ores,
        "wheat": wheat,
        "barley": barley,
        "iron": iron,
        "unnamed": unnamed,
        "loose": loose,
        "prices": prices,
    }


# ---------------------------------------------------------------------------
# API Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def api_client(db_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the FastAPI app in-process, on the test session."""
    app = create_app(use_lifespan=False)

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_session] = override_session

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# DTO Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_item():
    """Build an ItemDTO; category omitted unless given."""

    def _make(
        item_id: int = 1,
        item_gid: int = 289,
        item_name: str | None = "Wheat",
        category: CategoryDTO | None = None,
    ) -> ItemDTO:
        return ItemDTO(
            id=item_id,
            item_gid=item_gid,
            item_name=item_name,
            category=category,
            created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def make_price():
    """Build a PriceEntryDTO at a given time."""

    def _make(
        price: int,
        created_at: datetime,
        quantity: int = 1,
        entry_id: int = 1,
    ) -> PriceEntryDTO:
        return PriceEntryDTO(
            id=entry_id,
            item_id=1,
            price=price,
            quantity=quantity,
            created_at=created_at,
        )

    return _make


def _page_payload(
    content: list[dict[str, Any]],
    page: int = 0,
    size: int = 10,
    total: int | None = None,
) -> dict[str, Any]:
    """Wire-format page envelope with consistent flags."""
    total = len(content) if total is None else total
    total_pages = -(-total // size)
    first = page == 0
    last = page >= total_pages - 1
    return {
        "content": content,
        "pageNumber": page,
        "pageSize": size,
        "totalElements": total,
        "totalPages": total_pages,
        "first": first,
        "last": last,
        "hasNext": not last,
        "hasPrevious": not first,
    }


def _item_payload(item_id: int = 1, item_gid: int = 289, name: str | None = "Wheat") -> dict[str, Any]:
    """Wire-format item with no category."""
    return {
        "id": item_id,
        "itemGid": item_gid,
        "itemName": name,
        "category": None,
        "createdAt": "2026-10-01T00:00:00Z",
        "updatedAt": None,
    }


@pytest.fixture
def page_payload():
    return _page_payload


@pytest.fixture
def item_payload():
    return _item_payload
