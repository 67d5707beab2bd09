"""
app/schemas/envelope.py

Uniform response envelope shared by every endpoint.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """
    Base model serialized with camelCase keys on the wire.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(CamelModel, Generic[DataT]):
    """
    ``{success, data, error?, message?}`` wrapper.
    """

    success: bool = True
    data: DataT | None = None
    error: str | None = None
    message: str | None = None


class PaginationInfo(CamelModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    pages: int = Field(..., ge=0)


class PaginatedEnvelope(Envelope[DataT], Generic[DataT]):
    pagination: PaginationInfo


class FieldErrorDetail(CamelModel):
    """
    One rejected request parameter.
    """

    field: str
    message: str


class ErrorEnvelope(CamelModel):
    success: bool = False
    error: str
    message: str | None = None
    details: list[FieldErrorDetail] | None = None
