"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

ALLOWED_UPLOAD_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "text/csv",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
)


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated list; blank items are dropped.
    """

    raw_value = _get_str_env(name, "")
    if not raw_value:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class UploadSettings:
    """
    Limits and staging location for spreadsheet uploads.
    """

    max_file_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    storage_dir: str = "data/uploads"
    allowed_content_types: frozenset[str] = ALLOWED_UPLOAD_CONTENT_TYPES

    @property
    def max_file_size_label(self) -> str:
        megabytes = self.max_file_size_bytes / (1024 * 1024)
        return f"{megabytes:g}MB"


@dataclass(frozen=True)
class SalesIngestionSettings:
    """
    Runtime settings for the sales ingestion pipeline.
    """

    batch_size: int = 1000
    max_logged_rejections: int = 100
    log_rejected_rows: bool = True


@dataclass(frozen=True)
class HTTPSettings:
    """
    Cross-cutting HTTP behaviour for the API process.
    """

    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_upload_settings() -> UploadSettings:
    """
    Return cached upload settings from environment variables.
    """

    return UploadSettings(
        max_file_size_bytes=max(1, _get_int_env("UPLOAD_MAX_FILE_SIZE_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        storage_dir=_get_str_env("UPLOAD_STORAGE_DIR", "data/uploads"),
    )


@lru_cache(maxsize=1)
def get_sales_ingestion_settings() -> SalesIngestionSettings:
    """
    Return cached sales ingestion settings from environment variables.
    """

    return SalesIngestionSettings(
        batch_size=max(1, _get_int_env("SALES_INGEST_BATCH_SIZE", 1000)),
        max_logged_rejections=max(0, _get_int_env("SALES_INGEST_MAX_LOGGED_REJECTIONS", 100)),
        log_rejected_rows=_get_bool_env("SALES_INGEST_LOG_REJECTED_ROWS", True),
    )


@lru_cache(maxsize=1)
def get_http_settings() -> HTTPSettings:
    """
    Return cached HTTP settings from environment variables.
    """

    return HTTPSettings(
        cors_allow_origins=_get_list_env("CORS_ALLOW_ORIGINS", ("*",)),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )
