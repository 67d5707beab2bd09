"""
app/api/error_handlers.py

Maps exceptions onto the uniform ``{success: false, error}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.envelope import ErrorEnvelope, FieldErrorDetail
from app.services.sales_analytics_service import AnalyticsQueryError

logger = logging.getLogger(__name__)


def _envelope_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope.model_dump(by_alias=True, exclude_none=True)),
    )


def _field_name(location: tuple[object, ...]) -> str:
    # Drop the leading "query" / "body" / "path" marker.
    parts = [str(part) for part in location[1:]] or [str(part) for part in location]
    return ".".join(parts)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _envelope_response(exc.status_code, ErrorEnvelope(error=message))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        FieldErrorDetail(field=_field_name(tuple(error.get("loc", ()))), message=error.get("msg", ""))
        for error in exc.errors()
    ]
    return _envelope_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorEnvelope(error="Invalid request parameters", details=details),
    )


async def _handle_analytics_error(request: Request, exc: AnalyticsQueryError) -> JSONResponse:
    return _envelope_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorEnvelope(error=str(exc)),
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error method=%s path=%s", request.method, request.url.path)
    return _envelope_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorEnvelope(error="Something went wrong!", message="Internal server error"),
    )


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    application.add_exception_handler(RequestValidationError, _handle_validation_error)
    application.add_exception_handler(AnalyticsQueryError, _handle_analytics_error)
    application.add_exception_handler(Exception, _handle_unexpected_error)
