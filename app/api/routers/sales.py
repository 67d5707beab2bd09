"""
app/api/routers/sales.py

Read-only sales analytics endpoints.

GET /api/sales/summary        totals for a date window
GET /api/sales/filter         paginated, filtered record listing
GET /api/sales/trends         revenue per daily / weekly / monthly bucket
GET /api/sales/products       per-product totals, revenue descending
GET /api/sales/regions        per-region totals, revenue descending
GET /api/sales/categories     distinct categories
GET /api/sales/regions-list   distinct regions
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_date_range, get_sales_analytics_service
from app.domain.sales import DateRange, SalesFilter, TrendPeriod
from app.schemas.envelope import Envelope, PaginatedEnvelope, PaginationInfo
from app.schemas.sales import (
    ProductSalesResponse,
    RegionSalesResponse,
    SalesRecordResponse,
    SalesSummaryResponse,
    TrendPointResponse,
)
from app.services.sales_analytics_service import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    SalesAnalyticsService,
)

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get(
    "/summary",
    response_model=Envelope[SalesSummaryResponse],
    response_model_exclude_none=True,
)
def get_summary(
    date_range: DateRange = Depends(get_date_range),
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> Envelope[SalesSummaryResponse]:
    """
    Total quantity, revenue, average unit price and transaction count.
    """

    summary = analytics.get_summary(date_range)
    return Envelope(data=SalesSummaryResponse.model_validate(summary, from_attributes=True))


@router.get(
    "/filter",
    response_model=PaginatedEnvelope[list[SalesRecordResponse]],
    response_model_exclude_none=True,
)
def filter_sales(
    product: str | None = Query(default=None, description="Case-insensitive substring"),
    category: str | None = Query(default=None, description="Case-insensitive substring"),
    region: str | None = Query(default=None, description="Case-insensitive substring"),
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    date_range: DateRange = Depends(get_date_range),
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> PaginatedEnvelope[list[SalesRecordResponse]]:
    sales_filter = SalesFilter(
        product=product,
        category=category,
        region=region,
        date_range=date_range,
    )
    result = analytics.list_sales(sales_filter, page=page, limit=limit)
    return PaginatedEnvelope(
        data=[
            SalesRecordResponse.model_validate(record, from_attributes=True)
            for record in result.records
        ],
        pagination=PaginationInfo(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get(
    "/trends",
    response_model=Envelope[list[TrendPointResponse]],
    response_model_exclude_none=True,
)
def get_trends(
    period: TrendPeriod = Query(..., description="daily, weekly, or monthly"),
    date_range: DateRange = Depends(get_date_range),
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> Envelope[list[TrendPointResponse]]:
    """
    Revenue, quantity and transaction count per time bucket, oldest first.

    Weekly buckets are ``YYYY-W<week>`` with Sunday-first week numbering (00-53).
    """

    trends = analytics.get_trends(period, date_range)
    return Envelope(
        data=[TrendPointResponse.model_validate(bucket, from_attributes=True) for bucket in trends]
    )


@router.get(
    "/products",
    response_model=Envelope[list[ProductSalesResponse]],
    response_model_exclude_none=True,
)
def get_products(
    date_range: DateRange = Depends(get_date_range),
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> Envelope[list[ProductSalesResponse]]:
    rows = analytics.get_product_breakdown(date_range)
    return Envelope(
        data=[ProductSalesResponse.model_validate(row, from_attributes=True) for row in rows]
    )


@router.get(
    "/regions",
    response_model=Envelope[list[RegionSalesResponse]],
    response_model_exclude_none=True,
)
def get_regions(
    date_range: DateRange = Depends(get_date_range),
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> Envelope[list[RegionSalesResponse]]:
    rows = analytics.get_region_breakdown(date_range)
    return Envelope(
        data=[RegionSalesResponse.model_validate(row, from_attributes=True) for row in rows]
    )


@router.get("/categories", response_model=Envelope[list[str]], response_model_exclude_none=True)
def get_categories(
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> Envelope[list[str]]:
    return Envelope(data=analytics.list_categories())


@router.get("/regions-list", response_model=Envelope[list[str]], response_model_exclude_none=True)
def get_regions_list(
    analytics: SalesAnalyticsService = Depends(get_sales_analytics_service),
) -> Envelope[list[str]]:
    return Envelope(data=analytics.list_regions())
