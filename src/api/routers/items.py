"""
Item and price history endpoints.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src import repository
from src.api.dependencies import get_session
from src.config import settings
from src.exceptions import BusinessError
from src.mappers import item_to_dto, price_entry_to_dto
from src.schemas import ItemDTO, PagedResponse, PriceEntryDTO

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/items")


@router.get("", response_model=PagedResponse[ItemDTO])
async def list_items(
    page: int = Query(0, ge=0, description="Page number (0-indexed)"),
    size: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Page size",
    ),
    search: str | None = Query(None, description="Search by item name"),
    category_id: int | None = Query(
        None, alias="categoryId", description="Filter by category ID"
    ),
    session: AsyncSession = Depends(get_session),
) -> PagedResponse[ItemDTO]:
    """
    List items ordered by id.

    ``categoryId`` and ``search`` narrow the listing independently; when both
    are given an item must match both.
    """
    logger.debug(
        "list_items_requested",
        page=page,
        size=size,
        search=search,
        category_id=category_id,
    )
    items, total = await repository.find_items_page(
        session, page, size, search=search, category_id=category_id
    )
    return PagedResponse[ItemDTO].of(
        [item_to_dto(item) for item in items],
        page=page,
        size=size,
        total_elements=total,
    )


@router.get("/{item_id}", response_model=ItemDTO)
async def get_item(
    item_id: int,
    session: AsyncSession = Depends(get_session),
) -> ItemDTO:
    item = await repository.get_item(session, item_id)
    return item_to_dto(item)


@router.get("/{item_id}/prices", response_model=list[PriceEntryDTO])
async def list_item_prices(
    item_id: int,
    start_date: date | None = Query(
        None, alias="startDate", description="First day included (YYYY-MM-DD)"
    ),
    end_date: date | None = Query(
        None, alias="endDate", description="Last day included (YYYY-MM-DD)"
    ),
    quantity: int | None = Query(None, description="Lot size: 1, 10 or 100"),
    session: AsyncSession = Depends(get_session),
) -> list[PriceEntryDTO]:
    """Price history of one item, oldest first, within inclusive day bounds.

    ``quantity`` narrows the history to one lot size.
    """
    if start_date is not None and end_date is not None and start_date > end_date:
        raise BusinessError(
            f"startDate {start_date.isoformat()} is after endDate {end_date.isoformat()}"
        )
    if quantity is not None and quantity not in settings.VALID_QUANTITIES:
        raise BusinessError(
            f"quantity must be one of {sorted(settings.VALID_QUANTITIES)}, got {quantity}"
        )

    item = await repository.get_item(session, item_id)

    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc) if start_date else None
    end = datetime.combine(end_date, time.max, tzinfo=timezone.utc) if end_date else None

    entries = await repository.find_price_history(
        session, item.id, start=start, end=end, quantity=quantity
    )
    logger.debug(
        "price_history_loaded",
        item_id=item_id,
        start_date=str(start_date),
        end_date=str(end_date),
        quantity=quantity,
        count=len(entries),
    )
    return [price_entry_to_dto(entry, include_item=False) for entry in entries]
