"""
Dofus Retro Tracker - SubCategory Model

Auction house sub-categories (Cereals, Fish, Minerals...). Identity is the
game's dofus_id; the local id is only a storage key.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import TIMESTAMP, CheckConstraint, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, utcnow

if TYPE_CHECKING:
    from src.models.item import Item


class SubCategory(Base):
    """
    An auction house sub-category.

    Deleting a sub-category never deletes its items: the items relationship
    only cascades save-update/merge and the FK on items is ON DELETE SET NULL.
    """

    __tablename__ = "sub_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dofus_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        comment="Game category identifier",
    )
    name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Display name (e.g., 'Cereals')"
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

    items: Mapped[list[Item]] = relationship(
        back_populates="sub_category",
        cascade="save-update, merge",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("dofus_id > 0", name="chk_dofus_id_positive"),
        CheckConstraint("length(trim(name)) > 0", name="chk_name_not_empty"),
    )

    def __repr__(self) -> str:
        return f"<SubCategory dofus_id={self.dofus_id!r} name={self.name!r}>"
