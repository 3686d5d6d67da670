"""
Tests for the ORM models (src/models/).

Covers:
- Item equality/hash by GID
- PriceEntry.formatted_price
- Ownership: deleting an item deletes its prices, deleting a category keeps items
- Check constraints on price data
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from src.models import Item, PriceEntry, SubCategory


class TestItemIdentity:
    def test_equal_by_gid(self) -> None:
        assert Item(item_gid=289, item_name="Wheat") == Item(item_gid=289, item_name=None)

    def test_different_gid(self) -> None:
        assert Item(item_gid=289) != Item(item_gid=400)

    def test_unassigned_gid_never_equal(self) -> None:
        assert Item() != Item()

    def test_same_instance(self) -> None:
        item = Item()
        assert item == item

    def test_other_types(self) -> None:
        assert Item(item_gid=289) != 289

    def test_set_deduplicates_by_gid(self) -> None:
        items = {Item(item_gid=289), Item(item_gid=289), Item(item_gid=400)}
        assert len(items) == 2

    def test_hash_stable_when_gid_assigned(self) -> None:
        item = Item()
        before = hash(item)
        item.item_gid = 289
        assert hash(item) == before


@pytest.mark.parametrize(
    "price, expected",
    [
        (15000, "15 K"),
        (999, "0 K"),
        (1234567, "1,234 K"),
    ],
)
def test_formatted_price(price: int, expected: str) -> None:
    assert PriceEntry(price=price, quantity=1).formatted_price == expected


@pytest.mark.asyncio
async def test_timestamps_set_on_insert(db_session) -> None:
    item = Item(item_gid=289)
    db_session.add(item)
    await db_session.flush()

    assert item.created_at is not None
    assert item.updated_at is not None


@pytest.mark.asyncio
async def test_deleting_item_deletes_prices(db_session, seeded) -> None:
    wheat = await db_session.get(Item, seeded["wheat"].id)
    await db_session.delete(wheat)
    await db_session.commit()

    remaining = (
        await db_session.execute(select(func.count()).select_from(PriceEntry))
    ).scalar_one()
    assert remaining == 0


@pytest.mark.asyncio
async def test_deleting_category_keeps_items(db_session, seeded) -> None:
    ores = await db_session.get(SubCategory, seeded["ores"].id)
    await db_session.delete(ores)
    await db_session.commit()

    iron = (
        await db_session.execute(select(Item).where(Item.item_gid == 312))
    ).scalar_one()
    assert iron.sub_category_id is None
    assert iron.sub_category is None

    count = (await db_session.execute(select(func.count()).select_from(Item))).scalar_one()
    assert count == 5


@pytest.mark.asyncio
async def test_duplicate_gid_rejected(db_session, seeded) -> None:
    db_session.add(Item(item_gid=289, item_name="Another Wheat"))
    with pytest.raises(IntegrityError):
        await db_session.flush()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "price, quantity",
    [
        (0, 1),
        (-5, 1),
        (1000, 5),
    ],
)
async def test_price_constraints(db_session, seeded, price: int, quantity: int) -> None:
    db_session.add(PriceEntry(item_id=seeded["barley"].id, price=price, quantity=quantity))
    with pytest.raises(IntegrityError):
        await db_session.flush()


@pytest.mark.asyncio
async def test_item_loads_its_category(db_session, seeded) -> None:
    wheat = (
        await db_session.execute(select(Item).where(Item.item_gid == 289))
    ).scalar_one()
    assert wheat.sub_category is not None
    assert wheat.sub_category.dofus_id == 48
    assert wheat.sub_category.name == "Cereals"
