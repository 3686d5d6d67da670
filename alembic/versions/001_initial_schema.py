"""Initial schema: sub_categories, items, price_entries

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- sub_categories ---
    op.create_table(
        "sub_categories",
        sa.Column("id", sa.INTEGER(), primary_key=True, autoincrement=True),
        sa.Column("dofus_id", sa.INTEGER(), nullable=False, unique=True, comment="Game category identifier"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("dofus_id > 0", name="chk_dofus_id_positive"),
        sa.CheckConstraint("length(trim(name)) > 0", name="chk_name_not_empty"),
    )

    # --- items ---
    op.create_table(
        "items",
        sa.Column("id", sa.INTEGER(), primary_key=True, autoincrement=True),
        sa.Column("item_gid", sa.INTEGER(), nullable=False, unique=True, comment="Game item identifier (GID)"),
        sa.Column("item_name", sa.String(255), nullable=True),
        sa.Column(
            "sub_category_id",
            sa.INTEGER(),
            sa.ForeignKey("sub_categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("item_gid > 0", name="chk_item_gid_positive"),
        sa.CheckConstraint(
            "item_name IS NULL OR length(trim(item_name)) > 0",
            name="chk_item_name_length",
        ),
    )
    op.create_index("idx_item_gid", "items", ["item_gid"])
    op.create_index("idx_items_sub_category", "items", ["sub_category_id"])

    # --- price_entries (append-only) ---
    op.create_table(
        "price_entries",
        sa.Column("id", sa.INTEGER(), primary_key=True, autoincrement=True),
        sa.Column(
            "item_id",
            sa.INTEGER(),
            sa.ForeignKey("items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("price", sa.BIGINT(), nullable=False, comment="Observed price in kamas"),
        sa.Column("quantity", sa.INTEGER(), nullable=False, comment="Lot size: 1, 10 or 100"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("server_timestamp", sa.BIGINT(), nullable=True),
        sa.CheckConstraint("price > 0", name="chk_price_positive"),
        sa.CheckConstraint("quantity IN (1, 10, 100)", name="chk_quantity_valid"),
        sa.CheckConstraint(
            "server_timestamp IS NULL OR server_timestamp > 0",
            name="chk_server_timestamp_positive",
        ),
    )
    op.create_index("idx_created_at", "price_entries", ["created_at"])
    op.create_index("idx_item_quantity", "price_entries", ["item_id", "quantity"])


def downgrade() -> None:
    op.drop_index("idx_item_quantity", table_name="price_entries")
    op.drop_index("idx_created_at", table_name="price_entries")
    op.drop_table("price_entries")
    op.drop_index("idx_items_sub_category", table_name="items")
    op.drop_index("idx_item_gid", table_name="items")
    op.drop_table("items")
    op.drop_table("sub_categories")
