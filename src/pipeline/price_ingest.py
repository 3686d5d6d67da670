"""
Dofus Retro Tracker - Price ingestion

Turns observed auction house prices into Item / PriceEntry rows. Items are
created on first sight of their GID with a placeholder name; invalid
observations are logged and skipped so one bad row never sinks a batch.

Also answers the per-lot-size lookups (latest price, ranged history) and
the store statistics used by the seeding script.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import structlog
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src import repository
from src.config import settings
from src.exceptions import BusinessError
from src.models import Item, PriceEntry

logger = structlog.get_logger(__name__)


class PriceObservation(BaseModel):
    """A single price read off the auction house for one lot size."""

    item_gid: int = Field(..., description="Game item identifier")
    price: int = Field(..., description="Price in kamas")
    quantity: int = Field(..., description="Lot size: 1, 10 or 100")
    observed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the game server reported the price",
    )


def server_timestamp_ms(observed_at: datetime) -> int:
    """Observation time as milliseconds since the Unix epoch."""
    return int(observed_at.timestamp() * 1000)


def validate_observation(observation: PriceObservation) -> None:
    """Raise BusinessError if the observation cannot be stored."""
    if observation.item_gid <= 0:
        raise BusinessError.invalid_price_data(
            f"item_gid must be positive, got {observation.item_gid}"
        )
    if observation.price <= 0:
        raise BusinessError.invalid_price_data(
            f"price must be positive, got {observation.price}"
        )
    if observation.quantity not in settings.VALID_QUANTITIES:
        raise BusinessError.invalid_price_data(
            f"quantity must be one of {sorted(settings.VALID_QUANTITIES)}, "
            f"got {observation.quantity}"
        )
    if server_timestamp_ms(observation.observed_at) <= 0:
        raise BusinessError.invalid_price_data(
            f"observed_at must be after the Unix epoch, got "
            f"{observation.observed_at.isoformat()}"
        )


async def get_or_create_item(session: AsyncSession, item_gid: int) -> Item:
    """
    Return the item with this GID, creating it if it does not exist yet.

    New items get the placeholder name "Item #<gid>" until a real name is
    known. The new row is flushed, not committed.
    """
    existing = await repository.find_item_by_gid(session, item_gid)
    if existing is not None:
        return existing

    item = Item(item_gid=item_gid, item_name=f"Item #{item_gid}")
    session.add(item)
    await session.flush()

    logger.info("item_created", item_gid=item_gid, item_id=item.id)
    return item


async def persist_price_data(
    session: AsyncSession,
    observations: list[PriceObservation],
) -> int:
    """
    Store a batch of observations and commit.

    Args:
        session: Async database session.
        observations: Observed prices, possibly containing invalid rows.

    Returns:
        Number of price entries persisted.

    Raises:
        BusinessError: If the database rejects the batch.
    """
    if not observations:
        return 0

    entries: list[PriceEntry] = []
    try:
        for observation in observations:
            try:
                validate_observation(observation)
            except BusinessError as e:
                logger.warning(
                    "price_observation_skipped",
                    item_gid=observation.item_gid,
                    reason=str(e),
                )
                continue

            item = await get_or_create_item(session, observation.item_gid)
            entry = PriceEntry(
                item_id=item.id,
                price=observation.price,
                quantity=observation.quantity,
                server_timestamp=server_timestamp_ms(observation.observed_at),
            )
            session.add(entry)
            entries.append(entry)

        if entries:
            await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(
            "price_persist_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise BusinessError.database_error("persist_price_data", e) from e

    logger.info(
        "price_entries_persisted",
        received=len(observations),
        persisted=len(entries),
    )
    return len(entries)


class StoreStatistics(BaseModel):
    """Row counts of the price store."""

    items: int
    price_entries: int

    def __str__(self) -> str:
        return f"Items: {self.items}, Price Entries: {self.price_entries}"


async def get_latest_price(
    session: AsyncSession,
    item_gid: int,
    quantity: int,
) -> PriceEntry | None:
    """Latest observation for one lot size, or None for an unknown GID."""
    return await repository.find_latest_price(session, item_gid, quantity)


async def get_price_history(
    session: AsyncSession,
    item_gid: int,
    quantity: int,
    start: datetime,
    end: datetime,
) -> list[PriceEntry]:
    """
    Observations for one lot size between ``start`` and ``end`` (inclusive),
    oldest first. An unknown GID has an empty history.
    """
    item = await repository.find_item_by_gid(session, item_gid)
    if item is None:
        return []
    return await repository.find_price_history(
        session, item.id, start=start, end=end, quantity=quantity
    )


async def get_statistics(session: AsyncSession) -> StoreStatistics:
    return StoreStatistics(
        items=await repository.count_items(session),
        price_entries=await repository.count_price_entries(session),
    )


async def purge_price_entries_before(session: AsyncSession, cutoff: datetime) -> int:
    """Delete entries older than ``cutoff`` and commit. Returns rows deleted."""
    deleted = await repository.delete_price_entries_before(session, cutoff)
    await session.commit()
    logger.info("price_entries_purged", cutoff=cutoff.isoformat(), deleted=deleted)
    return deleted


async def purge_expired_price_entries(session: AsyncSession) -> int:
    """Apply the PRICE_RETENTION_DAYS policy."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=settings.PRICE_RETENTION_DAYS)
    return await purge_price_entries_before(session, cutoff)
