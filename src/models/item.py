"""
Dofus Retro Tracker - Item Model

An item traded in the auction house. Items are created the first time a price
is observed for their GID, usually before their display name is known.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import TIMESTAMP, CheckConstraint, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, utcnow

if TYPE_CHECKING:
    from src.models.price_entry import PriceEntry
    from src.models.sub_category import SubCategory


class Item(Base):
    """
    Auction house item keyed by the game's item GID.

    Equality uses the business key (item_gid), not the primary key, so two
    instances describing the same game item compare equal before either is
    persisted. The hash is constant per class so it cannot change when the
    GID or id is assigned later.

    Price entries are owned by the item: deleting the item deletes them, and
    an entry removed from ``prices`` is deleted as an orphan.
    """

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_gid: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        comment="Game item identifier (GID)",
    )
    item_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name, null until discovered",
    )
    sub_category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("sub_categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=True,
    )

    sub_category: Mapped[SubCategory | None] = relationship(
        back_populates="items",
        lazy="joined",
    )
    prices: Mapped[list[PriceEntry]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_item_gid", "item_gid"),
        Index("idx_items_sub_category", "sub_category_id"),
        CheckConstraint("item_gid > 0", name="chk_item_gid_positive"),
        CheckConstraint(
            "item_name IS NULL OR length(trim(item_name)) > 0",
            name="chk_item_name_length",
        ),
    )

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, Item):
            return NotImplemented
        return self.item_gid is not None and self.item_gid == other.item_gid

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"<Item id={self.id!r} item_gid={self.item_gid!r} name={self.item_name!r}>"
