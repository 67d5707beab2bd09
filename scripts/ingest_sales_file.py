"""
Ingest one local CSV / Excel sales file from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from app.services.sales_ingestion_service import (
    IngestionPersistenceError,
    SalesIngestionError,
    get_sales_ingestion_service,
)
from app.storage.upload_staging import UploadStagingError
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest a sales spreadsheet into sales_records.")
    parser.add_argument("path", type=Path, help="Path to a .csv, .xlsx or .xls file.")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        help="Logging level (default: INFO).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if not args.path.is_file():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1

    service = get_sales_ingestion_service()
    try:
        with SessionLocal() as db:
            report = service.ingest(
                content=args.path.read_bytes(),
                file_name=args.path.name,
                db=db,
            )
    except (SalesIngestionError, IngestionPersistenceError, UploadStagingError) as exc:
        print(json.dumps({"success": False, "error": str(exc)}, indent=2))
        return 1

    payload = {
        "success": True,
        "inserted": report.inserted_count,
        "total": report.total_parsed_count,
        "errors": report.rejected_count,
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
