"""create sales_records table

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

_INDEXES: tuple[tuple[str, list[str]], ...] = (
    ("ix_sales_records_date", ["date"]),
    ("ix_sales_records_product", ["product"]),
    ("ix_sales_records_category", ["category"]),
    ("ix_sales_records_region", ["region"]),
    ("ix_sales_records_date_region", ["date", "region"]),
    ("ix_sales_records_date_category", ["date", "category"]),
    ("ix_sales_records_date_product", ["date", "product"]),
    ("ix_sales_records_region_category", ["region", "category"]),
)


def upgrade() -> None:
    op.create_table(
        "sales_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("product", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=255), nullable=False),
        sa.Column("region", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(), nullable=False, comment="Unit price, stored at the uploaded precision"),
        sa.Column(
            "revenue",
            sa.Numeric(),
            nullable=False,
            comment="Stored as uploaded; never derived from quantity * price",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quantity > 0", name="ck_sales_records_quantity_positive"),
        sa.CheckConstraint("price > 0", name="ck_sales_records_price_positive"),
        sa.CheckConstraint("revenue >= 0", name="ck_sales_records_revenue_non_negative"),
    )
    for name, columns in _INDEXES:
        op.create_index(name, "sales_records", columns, unique=False)


def downgrade() -> None:
    for name, _ in reversed(_INDEXES):
        op.drop_index(name, table_name="sales_records")
    op.drop_table("sales_records")
