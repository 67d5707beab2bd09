"""
db/models/sales_record.py

Canonical persisted sales transaction.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin


class SalesRecord(CreatedAtMixin, Base):
    __tablename__ = "sales_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    product: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    region: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(),
        nullable=False,
        comment="Unit price, stored at the uploaded precision",
    )
    revenue: Mapped[Decimal] = mapped_column(
        Numeric(),
        nullable=False,
        comment="Stored as uploaded; never derived from quantity * price",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sales_records_quantity_positive"),
        CheckConstraint("price > 0", name="ck_sales_records_price_positive"),
        CheckConstraint("revenue >= 0", name="ck_sales_records_revenue_non_negative"),
        Index("ix_sales_records_date", "date"),
        Index("ix_sales_records_product", "product"),
        Index("ix_sales_records_category", "category"),
        Index("ix_sales_records_region", "region"),
        Index("ix_sales_records_date_region", "date", "region"),
        Index("ix_sales_records_date_category", "date", "category"),
        Index("ix_sales_records_date_product", "date", "product"),
        Index("ix_sales_records_region_category", "region", "category"),
    )
