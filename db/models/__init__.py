"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.sales_record import SalesRecord

__all__ = [
    "SalesRecord",
]
