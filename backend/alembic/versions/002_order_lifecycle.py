"""Order lifecycle — line items, delivery address, kitchen notes and delivery times.

Revision ID: 002_order_lifecycle
Revises: 001_initial
Create Date: 2026-10-19

Adds order_items and the order columns checkout and fulfilment write.
Existing orders keep NULL in the new nullable columns.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_order_lifecycle"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("orders", sa.Column("kitchen_notes", sa.Text, nullable=True))
    op.add_column(
        "orders",
        sa.Column("delivery_address_id", UUID(as_uuid=True), sa.ForeignKey("addresses.id"), nullable=True),
    )
    op.add_column("orders", sa.Column("estimated_delivery_time", sa.DateTime(timezone=True), nullable=True))
    op.add_column("orders", sa.Column("actual_delivery_time", sa.DateTime(timezone=True), nullable=True))
    op.create_index("ix_orders_status", "orders", ["status"])

    op.create_table(
        "order_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_id", UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", UUID(as_uuid=True), sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("special_instructions", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])


def downgrade() -> None:
    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")
    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_column("orders", "actual_delivery_time")
    op.drop_column("orders", "estimated_delivery_time")
    op.drop_column("orders", "delivery_address_id")
    op.drop_column("orders", "kitchen_notes")
