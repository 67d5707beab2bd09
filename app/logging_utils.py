"""
Structured logging helpers for upload and request events.

Upload outcomes (`sales_upload_completed`, `sales_upload_no_valid_data`) and
HTTP access lines (`http_request`) are emitted as one JSON object per
line, keys sorted.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.

    Nothing is serialized when the logger would drop the record anyway.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
