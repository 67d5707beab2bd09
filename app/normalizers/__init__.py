"""
app/normalizers package marker.
"""

from app.normalizers.sales_row_normalizer import (
    CANONICAL_FIELDS,
    COLUMN_CANDIDATES,
    SalesRowNormalizer,
)

__all__ = [
    "CANONICAL_FIELDS",
    "COLUMN_CANDIDATES",
    "SalesRowNormalizer",
]
