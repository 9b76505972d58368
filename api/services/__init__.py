"""API services."""

from api.services.database import get_db, get_facets, get_store, DatabaseService
from api.services.entitlements import create_preview_products, has_full_access

__all__ = [
    "get_db",
    "get_facets",
    "get_store",
    "DatabaseService",
    "create_preview_products",
    "has_full_access",
]
