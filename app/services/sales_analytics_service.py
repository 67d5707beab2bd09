"""
app/services/sales_analytics_service.py

Read-side aggregation layer over canonical sales records.

Bucketing
---------
Trend buckets are rolled up in Python from per-day SQL totals:

    daily    YYYY-MM-DD
    weekly   YYYY-W<%U>   week of year, Sunday as first day (00-53);
                          days before the year's first Sunday are week 00
    monthly  YYYY-MM

All bucket keys are zero-padded, so ascending string order is chronological.

Average prices are rounded half-up to two decimals here, once, at the query
boundary. Stored values are never rounded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.sales import (
    DailyTotals,
    DateRange,
    ProductBreakdown,
    RegionBreakdown,
    SalesFilter,
    SalesPage,
    SalesSummary,
    TrendBucket,
    TrendPeriod,
)
from app.repositories.sales_record_repository import SalesRecordRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE: Final[int] = 1
DEFAULT_PAGE_LIMIT: Final[int] = 20
MAX_PAGE_LIMIT: Final[int] = 100

BUCKET_FORMATS: Final[dict[TrendPeriod, str]] = {
    TrendPeriod.DAILY: "%Y-%m-%d",
    TrendPeriod.WEEKLY: "%Y-W%U",
    TrendPeriod.MONTHLY: "%Y-%m",
}

_CENT = Decimal("0.01")


class AnalyticsQueryError(RuntimeError):
    """
    Raised when an aggregation query cannot be answered by the store.
    """


def bucket_key(day: date, period: TrendPeriod) -> str:
    """
    Return the trend bucket label for *day*.
    """

    return day.strftime(BUCKET_FORMATS[period])


def round_price(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def roll_up_daily_totals(
    daily: list[DailyTotals],
    period: TrendPeriod,
) -> list[TrendBucket]:
    """
    Merge per-day totals into period buckets, ascending by bucket key.
    """

    buckets: dict[str, list] = {}
    for totals in daily:
        key = bucket_key(totals.day, period)
        current = buckets.setdefault(key, [Decimal("0"), 0, 0])
        current[0] += totals.revenue
        current[1] += totals.sales
        current[2] += totals.transactions

    return [
        TrendBucket(period=key, revenue=revenue, sales=sales, transactions=transactions)
        for key, (revenue, sales, transactions) in sorted(buckets.items())
    ]


class SalesAnalyticsService:
    """
    Summary, trend, breakdown and listing queries.

    All methods are read-only.

    Parameters
    ----------
    session:
        Active SQLAlchemy session. The caller controls its lifecycle.
    """

    def __init__(self, session: Session) -> None:
        self._repository = SalesRecordRepository(session)

    def get_summary(self, date_range: DateRange | None = None) -> SalesSummary:
        """
        Totals over the filtered set; the zero summary when nothing matches.
        """

        with self._query("summary"):
            summary = self._repository.summarize(date_range)
        return SalesSummary(
            total_sales=summary.total_sales,
            total_revenue=summary.total_revenue,
            average_price=round_price(summary.average_price),
            transaction_count=summary.transaction_count,
        )

    def get_trends(
        self,
        period: TrendPeriod,
        date_range: DateRange | None = None,
    ) -> list[TrendBucket]:
        with self._query("trends"):
            daily = self._repository.daily_totals(date_range)
        trends = roll_up_daily_totals(daily, period)
        logger.debug("get_trends period=%s days=%d buckets=%d", period.value, len(daily), len(trends))
        return trends

    def get_product_breakdown(self, date_range: DateRange | None = None) -> list[ProductBreakdown]:
        with self._query("products"):
            rows = self._repository.totals_by_product(date_range)
        return [
            ProductBreakdown(
                product=row.product,
                revenue=row.revenue,
                sales=row.sales,
                transactions=row.transactions,
                average_price=round_price(row.average_price),
            )
            for row in rows
        ]

    def get_region_breakdown(self, date_range: DateRange | None = None) -> list[RegionBreakdown]:
        with self._query("regions"):
            return self._repository.totals_by_region(date_range)

    def list_categories(self) -> list[str]:
        with self._query("categories"):
            return self._repository.distinct_categories()

    def list_regions(self) -> list[str]:
        with self._query("regions-list"):
            return self._repository.distinct_regions()

    def list_sales(
        self,
        sales_filter: SalesFilter,
        *,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> SalesPage:
        """
        Page through matching records, newest first.

        ``page`` is 1-based; ``limit`` is clamped into [1, MAX_PAGE_LIMIT].
        """

        page = max(1, page)
        limit = min(MAX_PAGE_LIMIT, max(1, limit))
        with self._query("filter"):
            total = self._repository.count_matching(sales_filter)
            records = self._repository.find_matching(
                sales_filter,
                offset=(page - 1) * limit,
                limit=limit,
            )
        return SalesPage(records=records, page=page, limit=limit, total=total)

    @contextmanager
    def _query(self, name: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Sales analytics query failed query=%s: %s", name, exc)
            raise AnalyticsQueryError(f"Failed to fetch {name} data") from exc
