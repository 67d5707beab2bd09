"""
app/schemas package marker.
"""

from app.schemas.envelope import (
    CamelModel,
    Envelope,
    ErrorEnvelope,
    FieldErrorDetail,
    PaginatedEnvelope,
    PaginationInfo,
)
from app.schemas.sales import (
    ProductSalesResponse,
    RegionSalesResponse,
    SalesRecordResponse,
    SalesSummaryResponse,
    TrendPointResponse,
)
from app.schemas.upload import UploadResultResponse

__all__ = [
    "CamelModel",
    "Envelope",
    "ErrorEnvelope",
    "FieldErrorDetail",
    "PaginatedEnvelope",
    "PaginationInfo",
    "ProductSalesResponse",
    "RegionSalesResponse",
    "SalesRecordResponse",
    "SalesSummaryResponse",
    "TrendPointResponse",
    "UploadResultResponse",
]
