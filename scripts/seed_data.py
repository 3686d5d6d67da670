"""
Dofus Retro Tracker - Seed / import script

Creates a category and records price observations for an item, going
through the same ingestion path as live captures.

Usage:
    python scripts/seed_data.py --category-id 48 --category-name Cereals \
        --item-gid 289 --item-name Wheat --price 1200:1 --price 11000:10
    python scripts/seed_data.py --item-gid 312 --price 450000:100
    python scripts/seed_data.py --purge
    python scripts/seed_data.py --stats
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Resolve project root so this script can be run from any working directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from src.config import settings
from src.database import create_db_engine
from src.logging_setup import configure_logging
from src.mappers import latest_price_to_dto
from src.models import SubCategory
from src.pipeline.price_ingest import (
    PriceObservation,
    get_latest_price,
    get_or_create_item,
    get_statistics,
    persist_price_data,
    purge_expired_price_entries,
)


def _price_arg(value: str) -> tuple[int, int]:
    """Parse PRICE:QUANTITY, e.g. 11000:10."""
    try:
        price, quantity = value.split(":", 1)
        return int(price), int(quantity)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected PRICE:QUANTITY, got {value!r}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed categories, items and prices into the tracker database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--category-id", type=int, default=None, help="Game category id.")
    parser.add_argument("--category-name", type=str, default=None, help="Category name.")
    parser.add_argument("--item-gid", type=int, default=None, help="Game item id (GID).")
    parser.add_argument("--item-name", type=str, default=None, help="Item display name.")
    parser.add_argument(
        "--price",
        type=_price_arg,
        action="append",
        default=[],
        help="Observed price as PRICE:QUANTITY (repeatable). Quantity is 1, 10 or 100.",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print item and price entry counts and exit.",
    )
    parser.add_argument(
        "--purge",
        action="store_true",
        help="Delete price entries older than PRICE_RETENTION_DAYS and exit.",
    )
    return parser.parse_args()


async def seed(args: argparse.Namespace) -> None:
    engine, session_factory = create_db_engine()
    try:
        async with session_factory() as session:
            if args.purge:
                deleted = await purge_expired_price_entries(session)
                print(f"Purged {deleted} price entries.")
                return
            if args.stats:
                print(await get_statistics(session))
                return

            category = None
            if args.category_id is not None:
                result = await session.execute(
                    select(SubCategory).where(SubCategory.dofus_id == args.category_id)
                )
                category = result.scalars().first()
                if category is None:
                    category = SubCategory(
                        dofus_id=args.category_id,
                        name=args.category_name or f"Category #{args.category_id}",
                    )
                    session.add(category)
                    await session.flush()

            if args.item_gid is None:
                await session.commit()
                print("No item given, nothing else to do.")
                return

            item = await get_or_create_item(session, args.item_gid)
            if args.item_name:
                item.item_name = args.item_name
            if category is not None:
                item.sub_category_id = category.id
            await session.commit()

            observations = [
                PriceObservation(item_gid=args.item_gid, price=price, quantity=quantity)
                for price, quantity in args.price
            ]
            persisted = await persist_price_data(session, observations)

            print(f"Item {item.item_gid} ({item.item_name}) -> id {item.id}")
            print(f"  price entries stored = {persisted}/{len(observations)}")
            for quantity in sorted(settings.VALID_QUANTITIES):
                latest = latest_price_to_dto(
                    await get_latest_price(session, item.item_gid, quantity)
                )
                if latest is not None:
                    print(f"  latest x{quantity}: {latest.price:,} kamas at {latest.timestamp}")
            print(f"  {await get_statistics(session)}")
    finally:
        await engine.dispose()


def main() -> None:
    args = parse_args()
    configure_logging(log_level="INFO")
    try:
        asyncio.run(seed(args))
    except Exception as e:
        print(f"Seeding failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
