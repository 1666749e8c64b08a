"""create order discount ledger tables

Revision ID: 8b2e5d0a6c31
Revises: 3f9a1c7d2e4b
Create Date: 2026-10-12 09:40:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8b2e5d0a6c31"
down_revision = "3f9a1c7d2e4b"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "order_discounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("order_id", sa.String(length=36), nullable=False),
        sa.Column("discount_id", sa.String(length=36), nullable=True),
        sa.Column("code", sa.String(length=50), nullable=True),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["discount_id"], ["discounts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_order_discounts_order_id"), "order_discounts", ["order_id"])
    op.create_index(op.f("ix_order_discounts_discount_id"), "order_discounts", ["discount_id"])
    op.create_index(op.f("ix_order_discounts_created_at"), "order_discounts", ["created_at"])

    op.create_table(
        "order_item_discounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("order_item_id", sa.String(length=36), nullable=False),
        sa.Column("discount_id", sa.String(length=36), nullable=True),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["order_item_id"], ["order_items.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["discount_id"], ["discounts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_order_item_discounts_order_item_id"), "order_item_discounts", ["order_item_id"]
    )
    op.create_index(
        op.f("ix_order_item_discounts_discount_id"), "order_item_discounts", ["discount_id"]
    )
    op.create_index(
        op.f("ix_order_item_discounts_created_at"), "order_item_discounts", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_order_item_discounts_created_at"), table_name="order_item_discounts")
    op.drop_index(op.f("ix_order_item_discounts_discount_id"), table_name="order_item_discounts")
    op.drop_index(
        op.f("ix_order_item_discounts_order_item_id"), table_name="order_item_discounts"
    )
    op.drop_table("order_item_discounts")
    op.drop_index(op.f("ix_order_discounts_created_at"), table_name="order_discounts")
    op.drop_index(op.f("ix_order_discounts_discount_id"), table_name="order_discounts")
    op.drop_index(op.f("ix_order_discounts_order_id"), table_name="order_discounts")
    op.drop_table("order_discounts")
