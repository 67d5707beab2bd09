"""
app/domain package marker.
"""

from app.domain.sales import (
    BatchInsertFailure,
    BatchInsertResult,
    DailyTotals,
    DateRange,
    IngestionReport,
    ProductBreakdown,
    RawRow,
    RegionBreakdown,
    RowRejection,
    SalesFilter,
    SalesPage,
    SalesRecordInput,
    SalesRecordView,
    SalesSummary,
    TrendBucket,
    TrendPeriod,
)

__all__ = [
    "BatchInsertFailure",
    "BatchInsertResult",
    "DailyTotals",
    "DateRange",
    "IngestionReport",
    "ProductBreakdown",
    "RawRow",
    "RegionBreakdown",
    "RowRejection",
    "SalesFilter",
    "SalesPage",
    "SalesRecordInput",
    "SalesRecordView",
    "SalesSummary",
    "TrendBucket",
    "TrendPeriod",
]
