"""
app/api/routers package marker.
"""

from app.api.routers.health import router as health_router
from app.api.routers.sales import router as sales_router
from app.api.routers.upload import router as upload_router

__all__ = [
    "health_router",
    "sales_router",
    "upload_router",
]
