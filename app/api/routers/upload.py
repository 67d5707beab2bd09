"""
app/api/routers/upload.py

Spreadsheet upload ingestion endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_sales_upload
from app.schemas.envelope import Envelope
from app.schemas.upload import UploadResultResponse
from app.services.sales_ingestion_service import (
    IngestionPersistenceError,
    SalesIngestionError,
    SalesIngestionService,
    get_sales_ingestion_service,
)
from app.storage.upload_staging import UploadStagingError
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["ingestion"])


@router.post(
    "/file",
    response_model=Envelope[UploadResultResponse],
    response_model_exclude_none=True,
)
def upload_sales_file(
    file: UploadFile = Depends(get_sales_upload),
    db: Session = Depends(get_db),
    ingestion_service: SalesIngestionService = Depends(get_sales_ingestion_service),
) -> Envelope[UploadResultResponse]:
    """
    Ingest one CSV or Excel file of sales rows.
    """

    try:
        report = ingestion_service.ingest(
            content=file.file.read(),
            file_name=file.filename or "",
            db=db,
        )
    except SalesIngestionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except (IngestionPersistenceError, UploadStagingError) as exc:
        logger.error("Sales upload failed file=%r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process uploaded file",
        ) from exc
    finally:
        file.file.close()

    return Envelope(
        message=f"Successfully imported {report.inserted_count} records",
        data=UploadResultResponse(
            inserted=report.inserted_count,
            total=report.total_parsed_count,
            errors=report.rejected_count,
        ),
    )
