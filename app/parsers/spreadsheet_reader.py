"""
app/parsers/spreadsheet_reader.py

Readers that turn a staged upload file into raw rows keyed by header text.

Both readers leave value interpretation to the normalizer: CSV cells stay
strings, workbook cells keep the types the workbook engine produced, and
empty cells become ``None``.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = frozenset({".csv"})
WORKBOOK_EXTENSIONS = frozenset({".xlsx", ".xls"})
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | WORKBOOK_EXTENSIONS

_WORKBOOK_ENGINES: dict[str, str] = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


class SpreadsheetParseError(ValueError):
    """
    Raised when an upload cannot be read as the format its extension declares.
    """


def iter_csv_rows(path: str | Path) -> Iterator[dict[str, Any]]:
    """
    Stream rows of a UTF-8 CSV file as header-keyed dicts.

    A file with no header line yields nothing.
    """

    try:
        with Path(path).open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if reader.fieldnames is None:
                return
            headers = [_clean_header(name) for name in reader.fieldnames]
            reader.fieldnames = headers
            for row in reader:
                yield {key: value for key, value in row.items() if key is not None}
    except UnicodeDecodeError as exc:
        raise SpreadsheetParseError("CSV must be UTF-8 encoded.") from exc
    except csv.Error as exc:
        raise SpreadsheetParseError(f"Invalid CSV format: {exc}") from exc


def read_workbook_rows(path: str | Path, *, extension: str) -> list[dict[str, Any]]:
    """
    Read the first sheet of an Excel workbook; its first row is the header.
    """

    engine = _WORKBOOK_ENGINES.get(extension.lower())
    if engine is None:
        raise SpreadsheetParseError(f"Unsupported workbook extension: {extension!r}.")

    try:
        frame = pd.read_excel(path, sheet_name=0, header=0, dtype=object, engine=engine)
    except ImportError:
        raise
    except Exception as exc:  # noqa: BLE001 - engines raise many unrelated types
        raise SpreadsheetParseError(f"Error processing Excel file: {exc}") from exc

    frame = frame.astype(object).where(pd.notnull(frame), None)
    frame.columns = [_clean_header(column) for column in frame.columns]
    rows = frame.to_dict(orient="records")
    logger.debug("Read %d workbook rows from %s", len(rows), Path(path).name)
    return rows


def _clean_header(name: Any) -> str:
    return str(name).strip() if name is not None else ""
