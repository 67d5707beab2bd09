"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import PurePath

from fastapi import Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.config import get_upload_settings
from app.domain.sales import DateRange
from app.services.sales_analytics_service import SalesAnalyticsService
from db.session import get_db


def _upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    handle = file.file
    handle.seek(0, os.SEEK_END)
    size = handle.tell()
    handle.seek(0)
    return size


def get_sales_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Reject uploads without a usable file name, with a disallowed MIME type,
    or above the size limit.

    Runs before any parsing; each failure maps to its own status code.
    """

    if not PurePath(file.filename or "").name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file name.",
        )

    settings = get_upload_settings()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    if content_type not in settings.allowed_content_types:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Invalid file type. Only CSV and Excel files are allowed.",
        )

    if _upload_size(file) > settings.max_file_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size too large. Maximum size is {settings.max_file_size_label}.",
        )

    return file


def get_date_range(
    start_date: date | None = Query(
        default=None,
        alias="startDate",
        description="Inclusive lower bound (YYYY-MM-DD).",
    ),
    end_date: date | None = Query(
        default=None,
        alias="endDate",
        description="Inclusive upper bound (YYYY-MM-DD).",
    ),
) -> DateRange:
    return DateRange(start=start_date, end=end_date)


def get_sales_analytics_service(db: Session = Depends(get_db)) -> SalesAnalyticsService:
    return SalesAnalyticsService(db)
