"""
app/parsers package marker.
"""

from app.parsers.spreadsheet_reader import (
    CSV_EXTENSIONS,
    SUPPORTED_EXTENSIONS,
    WORKBOOK_EXTENSIONS,
    SpreadsheetParseError,
    iter_csv_rows,
    read_workbook_rows,
)

__all__ = [
    "CSV_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "WORKBOOK_EXTENSIONS",
    "SpreadsheetParseError",
    "iter_csv_rows",
    "read_workbook_rows",
]
