"""
Dofus Retro Tracker - Entity to DTO mappers.

Null-safe field copies: every mapper returns None for a None entity.
"""

from __future__ import annotations

from src.models import Item, PriceEntry, SubCategory
from src.schemas import CategoryDTO, ItemDTO, LatestPriceDTO, PriceEntryDTO


def category_to_dto(category: SubCategory | None) -> CategoryDTO | None:
    if category is None:
        return None
    return CategoryDTO(id=category.id, dofus_id=category.dofus_id, name=category.name)


def item_to_dto(item: Item | None) -> ItemDTO | None:
    """Map an item, including its sub-category (or an explicit None)."""
    if item is None:
        return None
    return ItemDTO(
        id=item.id,
        item_gid=item.item_gid,
        item_name=item.item_name,
        category=category_to_dto(item.sub_category),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def price_entry_to_dto(
    entry: PriceEntry | None,
    include_item: bool = True,
) -> PriceEntryDTO | None:
    """
    Map a price entry.

    With include_item=False the owning item is never touched, so entries
    fetched without their item can be mapped inside async code.
    """
    if entry is None:
        return None

    item_name = None
    if include_item and entry.item is not None:
        item_name = entry.item.item_name

    return PriceEntryDTO(
        id=entry.id,
        item_id=entry.item_id,
        item_name=item_name,
        price=entry.price,
        quantity=entry.quantity,
        created_at=entry.created_at,
        server_timestamp=entry.server_timestamp,
        formatted_price=entry.formatted_price,
    )


def latest_price_to_dto(entry: PriceEntry | None) -> LatestPriceDTO | None:
    if entry is None:
        return None
    return LatestPriceDTO(price=entry.price, quantity=entry.quantity, timestamp=entry.created_at)
