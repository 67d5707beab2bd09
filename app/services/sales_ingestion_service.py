"""
app/services/sales_ingestion_service.py

Service layer for spreadsheet upload ingestion.

One upload moves through Received -> Parsed -> Normalized -> Persisted, or
stops at Failed. The uploaded bytes are staged to disk for the duration of
the run and removed on every exit path. Rows that fail the acceptance gate
are counted and logged, never reported back individually; every other
failure ends the upload with a typed exception.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_sales_ingestion_settings, get_upload_settings
from app.domain.sales import BatchInsertResult, IngestionReport, RawRow, RowRejection, SalesRecordInput
from app.logging_utils import log_event
from app.normalizers.sales_row_normalizer import SalesRowNormalizer
from app.parsers.spreadsheet_reader import (
    CSV_EXTENSIONS,
    WORKBOOK_EXTENSIONS,
    SpreadsheetParseError,
    iter_csv_rows,
    read_workbook_rows,
)
from app.repositories.sales_record_repository import SalesRecordRepository
from app.storage.upload_staging import StagedUpload, UploadStagingArea

logger = logging.getLogger(__name__)

# Header is line 1 in both CSV files and workbooks.
_FIRST_DATA_ROW = 2


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SalesIngestionError(ValueError):
    """
    Base class for upload failures caused by the file itself.
    """


class UnsupportedFileFormatError(SalesIngestionError):
    """
    Raised when the file extension is not .csv, .xlsx or .xls.
    """


class FileParseError(SalesIngestionError):
    """
    Raised when the file cannot be read as its declared format.
    """


class NoValidDataError(SalesIngestionError):
    """
    Raised when the file parsed but no row passed the acceptance gate.
    """


class IngestionPersistenceError(RuntimeError):
    """
    Raised when the store is unreachable or refuses the batch outright.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SalesIngestionService:
    """
    Coordinates staging, parsing, normalization, and bulk persistence.
    """

    def __init__(
        self,
        *,
        batch_size: int,
        max_logged_rejections: int,
        log_rejected_rows: bool,
        staging_area: UploadStagingArea | None = None,
        normalizer: SalesRowNormalizer | None = None,
    ) -> None:
        self._batch_size = max(1, batch_size)
        self._max_logged_rejections = max(0, max_logged_rejections)
        self._log_rejected_rows = log_rejected_rows
        self._staging = staging_area or UploadStagingArea()
        self._normalizer = normalizer or SalesRowNormalizer()

    def ingest(
        self,
        *,
        content: bytes,
        file_name: str,
        db: Session,
    ) -> IngestionReport:
        """
        Ingest one uploaded CSV or Excel file into ``sales_records``.

        Args:
            content:    Raw upload bytes.
            file_name:  Client-supplied name; its extension selects the parser.
            db:         Active SQLAlchemy session (caller owns lifecycle).

        Raises:
            UnsupportedFileFormatError, FileParseError, NoValidDataError,
            IngestionPersistenceError.
        """

        with self._staging.staged(file_name=file_name, content=content) as staged:
            accepted, rejected_rows = self._parse_and_normalize(staged)
            if not accepted:
                log_event(
                    logger,
                    logging.INFO,
                    "sales_upload_no_valid_data",
                    file_name=staged.file_name,
                    rejected_rows=rejected_rows,
                )
                raise NoValidDataError("No valid data found in the uploaded file")

            result = self._persist(db=db, records=accepted)

        report = IngestionReport(
            inserted_count=result.succeeded,
            total_parsed_count=len(accepted),
            rejected_count=len(result.failures),
        )
        log_event(
            logger,
            logging.INFO,
            "sales_upload_completed",
            file_name=staged.file_name,
            accepted_rows=report.total_parsed_count,
            normalizer_rejected_rows=rejected_rows,
            inserted=report.inserted_count,
            store_rejected=report.rejected_count,
        )
        return report

    # ------------------------------------------------------------------
    # Ingestion internals
    # ------------------------------------------------------------------

    def _parse_and_normalize(
        self,
        staged: StagedUpload,
    ) -> tuple[list[SalesRecordInput], int]:
        accepted: list[SalesRecordInput] = []
        rejected_rows = 0

        try:
            for row_number, raw_row in enumerate(self._read_rows(staged), start=_FIRST_DATA_ROW):
                record, rejection = self._normalizer.normalize(raw_row, row_number=row_number)
                if record is None:
                    rejected_rows += 1
                    if rejection is not None:
                        self._log_rejection(rejection, rejected_rows)
                    continue
                accepted.append(record)
        except SpreadsheetParseError as exc:
            raise FileParseError(str(exc)) from exc

        return accepted, rejected_rows

    def _read_rows(self, staged: StagedUpload) -> Iterable[RawRow]:
        extension = staged.extension
        if extension in CSV_EXTENSIONS:
            return iter_csv_rows(staged.path)
        if extension in WORKBOOK_EXTENSIONS:
            return read_workbook_rows(staged.path, extension=extension)
        raise UnsupportedFileFormatError(
            f"Unsupported file format: {extension or 'no extension'}. "
            "Only .csv, .xlsx and .xls files are allowed."
        )

    def _persist(
        self,
        *,
        db: Session,
        records: list[SalesRecordInput],
    ) -> BatchInsertResult:
        repository = SalesRecordRepository(db)
        try:
            result = repository.insert_many(records, batch_size=self._batch_size)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise IngestionPersistenceError("Failed to persist sales records.") from exc

        for failure in result.failures:
            logger.warning(
                "Sales record refused by store index=%d message=%s",
                failure.index,
                failure.message,
            )
        return result

    def _log_rejection(self, rejection: RowRejection, rejected_so_far: int) -> None:
        if not self._log_rejected_rows or rejected_so_far > self._max_logged_rejections:
            return
        logger.warning(
            "Sales row rejected row=%s reasons=%s",
            rejection.row_number,
            "; ".join(rejection.reasons),
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_sales_ingestion_service() -> SalesIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_sales_ingestion_settings()
    return SalesIngestionService(
        batch_size=settings.batch_size,
        max_logged_rejections=settings.max_logged_rejections,
        log_rejected_rows=settings.log_rejected_rows,
        staging_area=UploadStagingArea(get_upload_settings().storage_dir),
    )
