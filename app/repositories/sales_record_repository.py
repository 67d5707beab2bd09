"""
app/repositories/sales_record_repository.py

Persistence and read-side queries for canonical sales records.

Query design
------------
Every read method issues one SQL statement. Aggregations run in the database;
only the trend roll-up from days to weeks or months happens in Python, so the
week convention does not depend on any SQL dialect's date formatting.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, func, insert, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from app.domain.sales import (
    BatchInsertFailure,
    BatchInsertResult,
    DailyTotals,
    DateRange,
    ProductBreakdown,
    RegionBreakdown,
    SalesFilter,
    SalesRecordInput,
    SalesRecordView,
    SalesSummary,
)
from db.models.sales_record import SalesRecord

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 1000
_LIKE_ESCAPE = "\\"

# Store-side refusals of individual rows. Anything else aborts the whole insert.
_ITEM_LEVEL_ERRORS = (IntegrityError, DataError)


def _as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _date_clauses(date_range: DateRange | None) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    if date_range is None:
        return clauses
    if date_range.start is not None:
        clauses.append(SalesRecord.date >= date_range.start)
    if date_range.end is not None:
        clauses.append(SalesRecord.date <= date_range.end)
    return clauses


def _contains_ignore_case(column: InstrumentedAttribute[str], needle: str) -> ColumnElement[bool]:
    escaped = (
        needle.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return column.ilike(f"%{escaped}%", escape=_LIKE_ESCAPE)


def _listing_clauses(sales_filter: SalesFilter) -> list[ColumnElement[bool]]:
    clauses = _date_clauses(sales_filter.date_range)
    for column, needle in (
        (SalesRecord.product, sales_filter.product),
        (SalesRecord.category, sales_filter.category),
        (SalesRecord.region, sales_filter.region),
    ):
        if needle:
            clauses.append(_contains_ignore_case(column, needle))
    return clauses


class SalesRecordRepository:
    """
    Repository for sales record inserts and aggregation reads.

    The caller owns the session and its commit/rollback lifecycle.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_many(
        self,
        rows: Sequence[SalesRecordInput],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> BatchInsertResult:
        """
        Insert rows without all-or-nothing semantics.

        Each chunk is inserted under its own savepoint. When the store refuses a
        chunk because of row data, that chunk is replayed row by row so the good
        rows still land and each refused row is reported with its input index.
        Connection-level failures propagate to the caller untouched.
        """

        if not rows:
            return BatchInsertResult(succeeded=0)

        size = max(1, batch_size)
        succeeded = 0
        failures: list[BatchInsertFailure] = []

        for start in range(0, len(rows), size):
            chunk = rows[start : start + size]
            payloads = [self._to_payload(row) for row in chunk]
            try:
                with self._session.begin_nested():
                    self._session.execute(insert(SalesRecord), payloads)
                succeeded += len(payloads)
                continue
            except _ITEM_LEVEL_ERRORS as exc:
                logger.warning(
                    "Bulk insert chunk refused start=%d size=%d; retrying row by row: %s",
                    start,
                    len(payloads),
                    exc.orig,
                )

            for offset, payload in enumerate(payloads):
                try:
                    with self._session.begin_nested():
                        self._session.execute(insert(SalesRecord), [payload])
                    succeeded += 1
                except _ITEM_LEVEL_ERRORS as exc:
                    failures.append(
                        BatchInsertFailure(index=start + offset, message=str(exc.orig))
                    )

        return BatchInsertResult(succeeded=succeeded, failures=tuple(failures))

    @staticmethod
    def _to_payload(row: SalesRecordInput) -> dict[str, Any]:
        return {
            "date": row.date,
            "product": row.product,
            "category": row.category,
            "region": row.region,
            "quantity": row.quantity,
            "price": row.price,
            "revenue": row.revenue,
        }

    # ------------------------------------------------------------------
    # Aggregations
    # ------------------------------------------------------------------

    def summarize(self, date_range: DateRange | None = None) -> SalesSummary:
        """
        Whole-set totals. Returns the zero-valued summary when nothing matches.
        """

        stmt = select(
            func.coalesce(func.sum(SalesRecord.quantity), 0),
            func.coalesce(func.sum(SalesRecord.revenue), 0),
            func.avg(SalesRecord.price),
            func.count(SalesRecord.id),
        ).where(*_date_clauses(date_range))

        total_sales, total_revenue, average_price, count = self._session.execute(stmt).one()
        return SalesSummary(
            total_sales=int(total_sales or 0),
            total_revenue=_as_decimal(total_revenue),
            average_price=_as_decimal(average_price),
            transaction_count=int(count or 0),
        )

    def daily_totals(self, date_range: DateRange | None = None) -> list[DailyTotals]:
        stmt = (
            select(
                SalesRecord.date,
                func.coalesce(func.sum(SalesRecord.revenue), 0),
                func.coalesce(func.sum(SalesRecord.quantity), 0),
                func.count(SalesRecord.id),
            )
            .where(*_date_clauses(date_range))
            .group_by(SalesRecord.date)
            .order_by(SalesRecord.date.asc())
        )
        return [
            DailyTotals(
                day=day,
                revenue=_as_decimal(revenue),
                sales=int(sales),
                transactions=int(transactions),
            )
            for day, revenue, sales, transactions in self._session.execute(stmt)
        ]

    def totals_by_product(self, date_range: DateRange | None = None) -> list[ProductBreakdown]:
        """
        Per-product totals, highest revenue first; ties ordered by product name.

        ``average_price`` is the raw database average; rounding is the caller's job.
        """

        revenue = func.coalesce(func.sum(SalesRecord.revenue), 0).label("revenue")
        stmt = (
            select(
                SalesRecord.product,
                revenue,
                func.coalesce(func.sum(SalesRecord.quantity), 0),
                func.count(SalesRecord.id),
                func.avg(SalesRecord.price),
            )
            .where(*_date_clauses(date_range))
            .group_by(SalesRecord.product)
            .order_by(revenue.desc(), SalesRecord.product.asc())
        )
        return [
            ProductBreakdown(
                product=product,
                revenue=_as_decimal(total_revenue),
                sales=int(sales),
                transactions=int(transactions),
                average_price=_as_decimal(average_price),
            )
            for product, total_revenue, sales, transactions, average_price in self._session.execute(stmt)
        ]

    def totals_by_region(self, date_range: DateRange | None = None) -> list[RegionBreakdown]:
        revenue = func.coalesce(func.sum(SalesRecord.revenue), 0).label("revenue")
        stmt = (
            select(
                SalesRecord.region,
                revenue,
                func.coalesce(func.sum(SalesRecord.quantity), 0),
                func.count(SalesRecord.id),
            )
            .where(*_date_clauses(date_range))
            .group_by(SalesRecord.region)
            .order_by(revenue.desc(), SalesRecord.region.asc())
        )
        return [
            RegionBreakdown(
                region=region,
                revenue=_as_decimal(total_revenue),
                sales=int(sales),
                transactions=int(transactions),
            )
            for region, total_revenue, sales, transactions in self._session.execute(stmt)
        ]

    def distinct_categories(self) -> list[str]:
        return self._distinct(SalesRecord.category)

    def distinct_regions(self) -> list[str]:
        return self._distinct(SalesRecord.region)

    def _distinct(self, column: InstrumentedAttribute[str]) -> list[str]:
        stmt = select(column).distinct().order_by(column.asc())
        return list(self._session.scalars(stmt).all())

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def count_matching(self, sales_filter: SalesFilter) -> int:
        stmt = select(func.count(SalesRecord.id)).where(*_listing_clauses(sales_filter))
        return int(self._session.scalar(stmt) or 0)

    def find_matching(
        self,
        sales_filter: SalesFilter,
        *,
        offset: int,
        limit: int,
    ) -> list[SalesRecordView]:
        """
        One page of matching records, newest date first.
        """

        stmt = (
            select(SalesRecord)
            .where(*_listing_clauses(sales_filter))
            .order_by(SalesRecord.date.desc(), SalesRecord.id.desc())
            .offset(max(0, offset))
            .limit(max(1, limit))
        )
        return [
            SalesRecordView(
                id=record.id,
                date=record.date,
                product=record.product,
                category=record.category,
                region=record.region,
                quantity=record.quantity,
                price=_as_decimal(record.price),
                revenue=_as_decimal(record.revenue),
            )
            for record in self._session.scalars(stmt)
        ]
