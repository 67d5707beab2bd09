"""
app/domain/sales.py

Domain models shared by the sales ingestion and analytics flows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

RawRow = Mapping[str, Any]
"""One parsed spreadsheet row keyed by its header text."""


@dataclass(frozen=True)
class SalesRecordInput:
    """
    Typed canonical sales record prepared for persistence.
    """

    date: date
    product: str
    category: str
    region: str
    quantity: int
    price: Decimal
    revenue: Decimal


@dataclass(frozen=True)
class RowRejection:
    """
    Why one parsed row failed the acceptance gate.
    """

    row_number: int
    reasons: tuple[str, ...]


@dataclass(frozen=True)
class BatchInsertFailure:
    """
    One record refused by the store during a bulk insert.
    """

    index: int
    message: str


@dataclass(frozen=True)
class BatchInsertResult:
    """
    Store-agnostic outcome of a non-atomic bulk insert.
    """

    succeeded: int
    failures: tuple[BatchInsertFailure, ...] = ()


@dataclass(frozen=True)
class IngestionReport:
    """
    End-of-upload ingestion report.

    ``total_parsed_count`` counts rows accepted by the normalizer, not raw rows.
    """

    inserted_count: int
    total_parsed_count: int
    rejected_count: int


class TrendPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive calendar date window. Either bound may be open.
    """

    start: date | None = None
    end: date | None = None


@dataclass(frozen=True)
class SalesFilter:
    """
    Listing filter: case-insensitive substrings plus a date window.
    """

    product: str | None = None
    category: str | None = None
    region: str | None = None
    date_range: DateRange = field(default_factory=DateRange)


@dataclass(frozen=True)
class SalesSummary:
    total_sales: int = 0
    total_revenue: Decimal = Decimal("0")
    average_price: Decimal = Decimal("0")
    transaction_count: int = 0


@dataclass(frozen=True)
class TrendBucket:
    period: str
    revenue: Decimal
    sales: int
    transactions: int


@dataclass(frozen=True)
class ProductBreakdown:
    product: str
    revenue: Decimal
    sales: int
    transactions: int
    average_price: Decimal


@dataclass(frozen=True)
class RegionBreakdown:
    region: str
    revenue: Decimal
    sales: int
    transactions: int


@dataclass(frozen=True)
class DailyTotals:
    """
    Per-day aggregate rows, the input of trend bucketing.
    """

    day: date
    revenue: Decimal
    sales: int
    transactions: int


@dataclass(frozen=True)
class SalesRecordView:
    id: int
    date: date
    product: str
    category: str
    region: str
    quantity: int
    price: Decimal
    revenue: Decimal


@dataclass(frozen=True)
class SalesPage:
    """
    One page of the filtered listing.
    """

    records: list[SalesRecordView]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit > 0 else 0
