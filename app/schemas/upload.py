"""
app/schemas/upload.py

Response schema for spreadsheet upload ingestion.
"""

from __future__ import annotations

from pydantic import Field

from app.schemas.envelope import CamelModel


class UploadResultResponse(CamelModel):
    """
    ``inserted`` rows landed, out of ``total`` normalizer-accepted rows;
    ``errors`` rows were refused by the store.
    """

    inserted: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
