from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.config import (
    DEFAULT_MAX_UPLOAD_BYTES,
    get_http_settings,
    get_sales_ingestion_settings,
    get_upload_settings,
)
from db.config import normalize_postgres_url


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    for factory in (get_upload_settings, get_sales_ingestion_settings, get_http_settings):
        factory.cache_clear()
    yield
    for factory in (get_upload_settings, get_sales_ingestion_settings, get_http_settings):
        factory.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "UPLOAD_MAX_FILE_SIZE_BYTES",
        "UPLOAD_STORAGE_DIR",
        "SALES_INGEST_BATCH_SIZE",
        "CORS_ALLOW_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    upload = get_upload_settings()
    assert upload.max_file_size_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert upload.max_file_size_label == "10MB"
    assert upload.storage_dir == "data/uploads"
    assert get_sales_ingestion_settings().batch_size == 1000
    assert get_http_settings().cors_allow_origins == ("*",)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UPLOAD_MAX_FILE_SIZE_BYTES", "2097152")
    monkeypatch.setenv("SALES_INGEST_BATCH_SIZE", "0")
    monkeypatch.setenv("SALES_INGEST_LOG_REJECTED_ROWS", "off")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, ,http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert get_upload_settings().max_file_size_label == "2MB"
    ingestion = get_sales_ingestion_settings()
    assert ingestion.batch_size == 1
    assert ingestion.log_rejected_rows is False
    http = get_http_settings()
    assert http.cors_allow_origins == ("http://a.test", "http://b.test")
    assert http.log_level == "DEBUG"


def test_malformed_integer_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UPLOAD_MAX_FILE_SIZE_BYTES", "ten megabytes")

    assert get_upload_settings().max_file_size_bytes == DEFAULT_MAX_UPLOAD_BYTES


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql+psycopg://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
    ],
)
def test_normalize_postgres_url(raw: str, expected: str) -> None:
    assert normalize_postgres_url(raw) == expected
