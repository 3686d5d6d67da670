"""
Dofus Retro Tracker - Price Entry Model

Append-only price observations. The auction house lists prices for lots of
1, 10 and 100 units; each row captures one of those figures.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    TIMESTAMP,
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, utcnow

if TYPE_CHECKING:
    from src.models.item import Item


class PriceEntry(Base):
    """
    One observed price, in kamas, for one lot size of an item.

    Index (item_id, quantity) supports per-lot history queries and
    (created_at) supports date-range scans and retention purges.
    """

    __tablename__ = "price_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
    )
    price: Mapped[int] = mapped_column(
        BigInteger, nullable=False, comment="Observed price in kamas"
    )
    quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Lot size: 1, 10 or 100"
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    server_timestamp: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
        comment="Game server timestamp, milliseconds since epoch",
    )

    item: Mapped[Item] = relationship(back_populates="prices")

    __table_args__ = (
        Index("idx_created_at", "created_at"),
        Index("idx_item_quantity", "item_id", "quantity"),
        CheckConstraint("price > 0", name="chk_price_positive"),
        CheckConstraint("quantity IN (1, 10, 100)", name="chk_quantity_valid"),
        CheckConstraint(
            "server_timestamp IS NULL OR server_timestamp > 0",
            name="chk_server_timestamp_positive",
        ),
    )

    @property
    def formatted_price(self) -> str:
        """Price in thousands of kamas, e.g. 15000 -> '15 K'."""
        return f"{self.price // 1000:,} K"

    def __repr__(self) -> str:
        return (
            f"<PriceEntry item_id={self.item_id!r} price={self.price} "
            f"quantity={self.quantity} at={self.created_at}>"
        )
