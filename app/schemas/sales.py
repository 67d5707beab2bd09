"""
app/schemas/sales.py

Response schemas for sales analytics endpoints.
"""

from __future__ import annotations

import datetime as dt

from pydantic import Field, computed_field

from app.schemas.envelope import CamelModel


class SalesSummaryResponse(CamelModel):
    total_sales: int = Field(..., ge=0)
    total_revenue: float
    average_price: float
    transaction_count: int = Field(..., ge=0)


class TrendPointResponse(CamelModel):
    period: str
    revenue: float
    sales: int
    transactions: int = Field(..., ge=0)


class ProductSalesResponse(CamelModel):
    product: str
    revenue: float
    sales: int
    transactions: int = Field(..., ge=0)
    average_price: float


class RegionSalesResponse(CamelModel):
    region: str
    revenue: float
    sales: int
    transactions: int = Field(..., ge=0)


class SalesRecordResponse(CamelModel):
    """
    One persisted sales record as returned by the filtered listing.
    """

    id: int
    date: dt.date
    product: str
    category: str
    region: str
    quantity: int
    price: float
    revenue: float

    @computed_field(alias="formattedDate")  # type: ignore[prop-decorator]
    @property
    def formatted_date(self) -> str:
        return self.date.isoformat()
