"""create discounts tables

Revision ID: 3f9a1c7d2e4b
Revises:
Create Date: 2026-10-12 09:15:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f9a1c7d2e4b"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "discounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=True),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("value", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("scope", sa.String(length=20), nullable=False),
        sa.Column("usage_limit", sa.Integer(), nullable=True),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("min_subtotal", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("is_automatic", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_discounts_code"), "discounts", ["code"], unique=True)
    op.create_index(op.f("ix_discounts_status"), "discounts", ["status"], unique=False)
    op.create_index(op.f("ix_discounts_starts_at"), "discounts", ["starts_at"], unique=False)
    op.create_index(op.f("ix_discounts_ends_at"), "discounts", ["ends_at"], unique=False)

    op.create_table(
        "discount_products",
        sa.Column("discount_id", sa.String(length=36), nullable=False),
        sa.Column("product_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["discount_id"], ["discounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("discount_id", "product_id"),
    )
    op.create_table(
        "discount_categories",
        sa.Column("discount_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["discount_id"], ["discounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("discount_id", "category_id"),
    )


def downgrade() -> None:
    op.drop_table("discount_categories")
    op.drop_table("discount_products")
    op.drop_index(op.f("ix_discounts_ends_at"), table_name="discounts")
    op.drop_index(op.f("ix_discounts_starts_at"), table_name="discounts")
    op.drop_index(op.f("ix_discounts_status"), table_name="discounts")
    op.drop_index(op.f("ix_discounts_code"), table_name="discounts")
    op.drop_table("discounts")
