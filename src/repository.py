"""
Dofus Retro Tracker - Query layer

Async SQLAlchemy queries used by the REST API and the ingestion service.
Lookups by local id raise ResourceNotFoundError; lookups by GID return None.
"""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import ResourceNotFoundError
from src.models import Item, PriceEntry, SubCategory

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


async def find_items_page(
    session: AsyncSession,
    page: int,
    size: int,
    search: str | None = None,
    category_id: int | None = None,
) -> tuple[list[Item], int]:
    """
    Fetch one page of items ordered by id, plus the total match count.

    Args:
        page: 0-indexed page number.
        size: Page size.
        search: Case-insensitive substring of the item name. Blank is ignored.
        category_id: Restrict to one sub-category (local id).

    Returns:
        (items on the page, total matching items).
    """
    conditions = []
    if category_id is not None:
        conditions.append(Item.sub_category_id == category_id)
    if search is not None and search.strip():
        # Literal substring: % and _ in the term match themselves
        conditions.append(
            func.lower(Item.item_name).contains(search.strip().lower(), autoescape=True)
        )

    count_stmt = select(func.count()).select_from(Item).where(*conditions)
    total = (await session.execute(count_stmt)).scalar_one()

    stmt = (
        select(Item)
        .where(*conditions)
        .order_by(Item.id)
        .offset(page * size)
        .limit(size)
    )
    items = list((await session.execute(stmt)).scalars().all())

    logger.debug(
        "items_page_loaded",
        page=page,
        size=size,
        search=search,
        category_id=category_id,
        total=total,
        returned=len(items),
    )
    return items, total


async def get_item(session: AsyncSession, item_id: int) -> Item:
    item = await session.get(Item, item_id)
    if item is None:
        raise ResourceNotFoundError.for_item(item_id)
    return item


async def find_item_by_gid(session: AsyncSession, item_gid: int) -> Item | None:
    stmt = select(Item).where(Item.item_gid == item_gid)
    return (await session.execute(stmt)).scalars().first()


# ---------------------------------------------------------------------------
# Price history
# ---------------------------------------------------------------------------


async def find_price_history(
    session: AsyncSession,
    item_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
    quantity: int | None = None,
) -> list[PriceEntry]:
    """
    Price entries of one item, oldest first.

    Both bounds are optional and inclusive. ``quantity`` restricts the
    history to one lot size. The caller is expected to have checked that the
    item exists.
    """
    stmt = select(PriceEntry).where(PriceEntry.item_id == item_id)
    if quantity is not None:
        stmt = stmt.where(PriceEntry.quantity == quantity)
    if start is not None:
        stmt = stmt.where(PriceEntry.created_at >= start)
    if end is not None:
        stmt = stmt.where(PriceEntry.created_at <= end)
    stmt = stmt.order_by(PriceEntry.created_at.asc(), PriceEntry.id.asc())

    return list((await session.execute(stmt)).scalars().all())


async def find_latest_price(
    session: AsyncSession,
    item_gid: int,
    quantity: int,
) -> PriceEntry | None:
    """Most recent entry for one lot size of the item with this GID, if any."""
    stmt = (
        select(PriceEntry)
        .join(Item, PriceEntry.item_id == Item.id)
        .where(Item.item_gid == item_gid, PriceEntry.quantity == quantity)
        .order_by(PriceEntry.created_at.desc(), PriceEntry.id.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalars().first()


async def count_items(session: AsyncSession) -> int:
    return (await session.execute(select(func.count()).select_from(Item))).scalar_one()


async def count_price_entries(session: AsyncSession) -> int:
    stmt = select(func.count()).select_from(PriceEntry)
    return (await session.execute(stmt)).scalar_one()


async def delete_price_entries_before(session: AsyncSession, cutoff: datetime) -> int:
    """Bulk-delete entries created before ``cutoff``. Returns the row count."""
    result = await session.execute(
        delete(PriceEntry)
        .where(PriceEntry.created_at < cutoff)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


async def list_categories(session: AsyncSession) -> list[SubCategory]:
    stmt = select(SubCategory).order_by(SubCategory.name)
    return list((await session.execute(stmt)).scalars().all())


async def get_category(session: AsyncSession, category_id: int) -> SubCategory:
    category = await session.get(SubCategory, category_id)
    if category is None:
        raise ResourceNotFoundError.for_category(category_id)
    return category


async def find_items_by_category(session: AsyncSession, category_id: int) -> list[Item]:
    """Items of one category by name, case-insensitive, unnamed items last."""
    stmt = (
        select(Item)
        .where(Item.sub_category_id == category_id)
        .order_by(
            Item.item_name.is_(None),
            func.lower(Item.item_name),
            Item.id,
        )
    )
    return list((await session.execute(stmt)).scalars().all())
