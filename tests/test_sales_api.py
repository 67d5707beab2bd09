"""
tests/test_sales_api.py

HTTP contract tests: envelope shape, camelCase keys, status codes.
"""

from __future__ import annotations

import io
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi import HTTPException, UploadFile
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from app.api.dependencies import get_sales_upload
from app.config import UploadSettings

CSV_MIME = "text/csv"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SCENARIO_CSV = (
    b"date,product,category,region,quantity,price,revenue\n"
    b"2024-01-01,Laptop,Electronics,North,5,1200,6000\n"
    b"2024-01-02,,Electronics,South,3,800,2400\n"
)


# ---------------------------------------------------------------------------
# Health and routing
# ---------------------------------------------------------------------------


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Sales Analytics API is running"}


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


def test_upload_scenario(client: TestClient, staging_dir: Path) -> None:
    response = client.post("/api/upload/file", files={"file": ("sales.csv", SCENARIO_CSV, CSV_MIME)})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Successfully imported 1 records"
    assert body["data"] == {"inserted": 1, "total": 1, "errors": 0}
    assert "error" not in body
    assert not staging_dir.exists() or list(staging_dir.iterdir()) == []

    summary = client.get("/api/sales/summary").json()["data"]
    assert summary == {
        "totalSales": 5,
        "totalRevenue": 6000.0,
        "averagePrice": 1200.0,
        "transactionCount": 1,
    }


def test_upload_with_no_valid_rows_is_bad_request(client: TestClient) -> None:
    response = client.post(
        "/api/upload/file",
        files={"file": ("sales.csv", b"date,product\n", CSV_MIME)},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No valid data found in the uploaded file"}


def test_upload_rejects_wrong_mime_type(client: TestClient) -> None:
    response = client.post(
        "/api/upload/file",
        files={"file": ("sales.json", b"{}", "application/json")},
    )

    assert response.status_code == 415
    assert response.json()["success"] is False
    assert "Only CSV and Excel" in response.json()["error"]


def test_upload_rejects_unsupported_extension_with_allowed_mime(client: TestClient) -> None:
    response = client.post(
        "/api/upload/file",
        files={"file": ("sales.txt", SCENARIO_CSV, CSV_MIME)},
    )

    assert response.status_code == 400
    assert "Unsupported file format" in response.json()["error"]


def test_upload_rejects_oversized_file(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "app.api.dependencies.get_upload_settings",
        lambda: UploadSettings(max_file_size_bytes=1024 * 1024),
    )
    oversized = SCENARIO_CSV + b"x" * (1024 * 1024)

    response = client.post("/api/upload/file", files={"file": ("sales.csv", oversized, CSV_MIME)})

    assert response.status_code == 413
    assert response.json() == {
        "success": False,
        "error": "File size too large. Maximum size is 1MB.",
    }


def test_upload_requires_file_field(client: TestClient) -> None:
    response = client.post("/api/upload/file")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request parameters"
    assert body["details"][0]["field"] == "file"


def test_corrupt_workbook_upload_is_bad_request(client: TestClient) -> None:
    response = client.post(
        "/api/upload/file",
        files={"file": ("sales.xlsx", b"not really a workbook", XLSX_MIME)},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Error processing Excel file")


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


@pytest.fixture()
def seeded(add_sales) -> None:
    add_sales(
        {"date": date(2024, 1, 5), "product": "Laptop", "region": "North", "quantity": 2,
         "price": Decimal("1000.00"), "revenue": Decimal("2000.00")},
        {"date": date(2024, 1, 20), "product": "Mouse", "category": "Accessories", "region": "South",
         "quantity": 4, "price": Decimal("25.00"), "revenue": Decimal("100.00")},
        {"date": date(2024, 2, 3), "product": "Laptop", "region": "South", "quantity": 1,
         "price": Decimal("1100.00"), "revenue": Decimal("1100.00")},
    )


def test_summary_with_date_window(client: TestClient, seeded: None) -> None:
    response = client.get("/api/sales/summary", params={"startDate": "2024-01-01", "endDate": "2024-01-31"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {
            "totalSales": 6,
            "totalRevenue": 2100.0,
            "averagePrice": 512.5,
            "transactionCount": 2,
        },
    }


def test_invalid_date_parameter_is_bad_request(client: TestClient) -> None:
    response = client.get("/api/sales/summary", params={"startDate": "yesterday"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request parameters"
    assert body["details"][0]["field"] == "startDate"


def test_trends_monthly(client: TestClient, seeded: None) -> None:
    response = client.get("/api/sales/trends", params={"period": "monthly"})

    assert response.status_code == 200
    assert response.json()["data"] == [
        {"period": "2024-01", "revenue": 2100.0, "sales": 6, "transactions": 2},
        {"period": "2024-02", "revenue": 1100.0, "sales": 1, "transactions": 1},
    ]


def test_trends_requires_known_period(client: TestClient) -> None:
    missing = client.get("/api/sales/trends")
    unknown = client.get("/api/sales/trends", params={"period": "yearly"})

    assert missing.status_code == 400
    assert missing.json()["details"][0]["field"] == "period"
    assert unknown.status_code == 400


def test_products(client: TestClient, seeded: None) -> None:
    data = client.get("/api/sales/products").json()["data"]

    assert data == [
        {"product": "Laptop", "revenue": 3100.0, "sales": 3, "transactions": 2, "averagePrice": 1050.0},
        {"product": "Mouse", "revenue": 100.0, "sales": 4, "transactions": 1, "averagePrice": 25.0},
    ]


def test_regions(client: TestClient, seeded: None) -> None:
    data = client.get("/api/sales/regions").json()["data"]

    assert [row["region"] for row in data] == ["North", "South"]
    assert data[1] == {"region": "South", "revenue": 1200.0, "sales": 5, "transactions": 2}


def test_categories_and_regions_list(client: TestClient, seeded: None) -> None:
    assert client.get("/api/sales/categories").json() == {
        "success": True,
        "data": ["Accessories", "Electronics"],
    }
    assert client.get("/api/sales/regions-list").json()["data"] == ["North", "South"]


def test_filter_listing(client: TestClient, seeded: None) -> None:
    response = client.get("/api/sales/filter", params={"product": "lap", "limit": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
    assert len(body["data"]) == 1
    record = body["data"][0]
    assert record["date"] == "2024-02-03"
    assert record["formattedDate"] == "2024-02-03"
    assert record["product"] == "Laptop"
    assert record["price"] == 1100.0
    assert set(record) == {
        "id", "date", "formattedDate", "product", "category", "region", "quantity", "price", "revenue",
    }


def test_filter_rejects_out_of_range_paging(client: TestClient) -> None:
    assert client.get("/api/sales/filter", params={"limit": 0}).status_code == 400
    assert client.get("/api/sales/filter", params={"limit": 101}).status_code == 400
    assert client.get("/api/sales/filter", params={"page": 0}).status_code == 400


def test_empty_store_responses(client: TestClient) -> None:
    assert client.get("/api/sales/summary").json()["data"] == {
        "totalSales": 0,
        "totalRevenue": 0.0,
        "averagePrice": 0.0,
        "transactionCount": 0,
    }
    assert client.get("/api/sales/products").json() == {"success": True, "data": []}
    listing = client.get("/api/sales/filter").json()
    assert listing["data"] == []
    assert listing["pagination"] == {"page": 1, "limit": 20, "total": 0, "pages": 0}


# ---------------------------------------------------------------------------
# Upload file name
# ---------------------------------------------------------------------------


def test_upload_without_usable_file_name_is_bad_request(client: TestClient) -> None:
    response = client.post("/api/upload/file", files={"file": ("/", SCENARIO_CSV, CSV_MIME)})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid file name."}


@pytest.mark.parametrize("file_name", [None, "", "   ", "/"])
def test_upload_dependency_rejects_blank_file_names(file_name: str | None) -> None:
    upload = UploadFile(
        io.BytesIO(SCENARIO_CSV),
        size=len(SCENARIO_CSV),
        filename=file_name,
        headers=Headers({"content-type": CSV_MIME}),
    )

    with pytest.raises(HTTPException) as excinfo:
        get_sales_upload(upload)

    assert excinfo.value.status_code == 400
