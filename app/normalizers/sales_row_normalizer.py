"""
app/normalizers/sales_row_normalizer.py

Turns one raw spreadsheet row into a canonical sales record or a rejection.

Column names arrive in whatever casing the exporting tool produced, so each
canonical field is probed under a fixed list of spellings. The first present
value wins. Coercion never raises: unparseable dates count as missing and
unparseable numbers become zero, after which the acceptance gate decides.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from app.domain.sales import RawRow, RowRejection, SalesRecordInput

CANONICAL_FIELDS: tuple[str, ...] = (
    "date",
    "product",
    "category",
    "region",
    "quantity",
    "price",
    "revenue",
)

COLUMN_CANDIDATES: dict[str, tuple[str, ...]] = {
    field: (field, field.capitalize(), field.upper()) for field in CANONICAL_FIELDS
}
"""Candidate header spellings per canonical field, in priority order."""

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)

_ZERO = Decimal("0")


class SalesRowNormalizer:
    """
    Resolves, coerces and gates raw rows. Stateless and free of I/O.
    """

    def __init__(self, candidates: dict[str, tuple[str, ...]] | None = None) -> None:
        self._candidates = candidates or COLUMN_CANDIDATES

    def normalize(
        self,
        raw_row: RawRow,
        *,
        row_number: int = 0,
    ) -> tuple[SalesRecordInput | None, RowRejection | None]:
        """
        Return ``(record, None)`` for an accepted row, ``(None, rejection)`` otherwise.

        Acceptance requires a valid date, non-empty product, category and region,
        ``quantity > 0`` and ``price > 0``. Revenue is coerced but never gated.
        """

        sale_date = self._parse_date(self.resolve(raw_row, "date"))
        product = self._parse_label(self.resolve(raw_row, "product"))
        category = self._parse_label(self.resolve(raw_row, "category"))
        region = self._parse_label(self.resolve(raw_row, "region"))
        quantity = self._parse_quantity(self.resolve(raw_row, "quantity"))
        price = self._parse_decimal(self.resolve(raw_row, "price"))
        revenue = self._parse_decimal(self.resolve(raw_row, "revenue"))

        reasons: list[str] = []
        if sale_date is None:
            reasons.append("date is missing or invalid")
        for name, label in (("product", product), ("category", category), ("region", region)):
            if not label:
                reasons.append(f"{name} is missing")
        if quantity <= 0:
            reasons.append("quantity must be greater than 0")
        if price <= _ZERO:
            reasons.append("price must be greater than 0")

        if reasons or sale_date is None:
            return None, RowRejection(row_number=row_number, reasons=tuple(reasons))

        return (
            SalesRecordInput(
                date=sale_date,
                product=product,
                category=category,
                region=region,
                quantity=quantity,
                price=price,
                revenue=revenue,
            ),
            None,
        )

    def resolve(self, raw_row: RawRow, field: str) -> Any:
        """
        Return the first present value among the field's candidate columns.
        """

        for key in self._candidates[field]:
            value = raw_row.get(key)
            if not self._is_blank(value):
                return value
        return None

    # ------------------------------------------------------------------
    # Coercion
    # ------------------------------------------------------------------

    def _parse_date(self, value: Any) -> date | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            return None

        raw = value.strip()
        normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
        try:
            return datetime.fromisoformat(normalized).date()
        except ValueError:
            pass

        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(raw, fmt).date()
            except ValueError:
                continue
        return None

    def _parse_label(self, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def _parse_quantity(self, value: Any) -> int:
        number = self._parse_decimal(value)
        return int(number)

    def _parse_decimal(self, value: Any) -> Decimal:
        if value is None or isinstance(value, bool):
            return _ZERO
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, int):
            return Decimal(value)
        else:
            # Floats go through str() so 0.1 becomes Decimal("0.1").
            try:
                number = Decimal(str(value).strip())
            except (InvalidOperation, ValueError):
                return _ZERO
        if not number.is_finite():
            return _ZERO
        return number

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        # NaN and NaT are the only values unequal to themselves.
        if value != value:
            return True
        if isinstance(value, str):
            return value.strip() == ""
        return False
