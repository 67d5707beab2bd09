"""
app/api/routers/health.py

Liveness endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def healthcheck() -> dict[str, str]:
    return {"status": "OK", "message": "Sales Analytics API is running"}
