"""
app/services package marker.
"""

from app.services.sales_analytics_service import AnalyticsQueryError, SalesAnalyticsService
from app.services.sales_ingestion_service import (
    FileParseError,
    IngestionPersistenceError,
    NoValidDataError,
    SalesIngestionError,
    SalesIngestionService,
    UnsupportedFileFormatError,
    get_sales_ingestion_service,
)

__all__ = [
    "AnalyticsQueryError",
    "FileParseError",
    "IngestionPersistenceError",
    "NoValidDataError",
    "SalesAnalyticsService",
    "SalesIngestionError",
    "SalesIngestionService",
    "UnsupportedFileFormatError",
    "get_sales_ingestion_service",
]
