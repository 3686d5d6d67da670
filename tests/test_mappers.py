"""Tests for src/mappers.py."""

from __future__ import annotations

from datetime import datetime, timezone

from src.mappers import category_to_dto, item_to_dto, latest_price_to_dto, price_entry_to_dto
from src.models import Item, PriceEntry, SubCategory

CREATED = datetime(2026, 10, 1, 8, 30, tzinfo=timezone.utc)


def _cereals() -> SubCategory:
    return SubCategory(id=3, dofus_id=48, name="Cereals")


def test_none_maps_to_none() -> None:
    assert category_to_dto(None) is None
    assert item_to_dto(None) is None
    assert price_entry_to_dto(None) is None


def test_category() -> None:
    dto = category_to_dto(_cereals())
    assert (dto.id, dto.dofus_id, dto.name) == (3, 48, "Cereals")


def test_item_with_category() -> None:
    item = Item(id=1, item_gid=289, item_name="Wheat", created_at=CREATED, updated_at=CREATED)
    item.sub_category = _cereals()

    dto = item_to_dto(item)

    assert dto.id == 1
    assert dto.item_gid == 289
    assert dto.item_name == "Wheat"
    assert dto.category.name == "Cereals"
    assert dto.created_at == CREATED


def test_item_without_category_or_name() -> None:
    dto = item_to_dto(Item(id=2, item_gid=999, created_at=CREATED))
    assert dto.item_name is None
    assert dto.category is None
    assert dto.model_dump(by_alias=True)["category"] is None


def test_price_entry_includes_item_name() -> None:
    item = Item(id=1, item_gid=289, item_name="Wheat", created_at=CREATED)
    entry = PriceEntry(
        id=10,
        item_id=1,
        price=15000,
        quantity=10,
        created_at=CREATED,
        server_timestamp=1_790_000_000_000,
    )
    entry.item = item

    dto = price_entry_to_dto(entry)

    assert dto.item_id == 1
    assert dto.item_name == "Wheat"
    assert dto.price == 15000
    assert dto.quantity == 10
    assert dto.server_timestamp == 1_790_000_000_000
    assert dto.formatted_price == "15 K"


def test_price_entry_without_item() -> None:
    entry = PriceEntry(id=11, item_id=1, price=1200, quantity=1, created_at=CREATED)

    dto = price_entry_to_dto(entry, include_item=False)

    assert dto.item_id == 1
    assert dto.item_name is None
    assert dto.formatted_price == "1 K"


def test_price_entry_with_unloaded_item() -> None:
    entry = PriceEntry(id=12, price=1200, quantity=1, created_at=CREATED)
    dto = price_entry_to_dto(entry)
    assert dto.item_id is None
    assert dto.item_name is None


def test_latest_price() -> None:
    entry = PriceEntry(id=13, item_id=1, price=11000, quantity=10, created_at=CREATED)

    dto = latest_price_to_dto(entry)

    assert (dto.price, dto.quantity, dto.timestamp) == (11000, 10, CREATED)
    assert dto.model_dump(by_alias=True) == {
        "price": 11000,
        "quantity": 10,
        "timestamp": CREATED,
    }
    assert latest_price_to_dto(None) is None
