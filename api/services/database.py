"""Database connection service for FastAPI."""

import duckdb
from typing import Optional
from pathlib import Path

from api.config import get_settings
from catalog.cache import TTLCache
from catalog.facets import FacetCatalog
from catalog.store import CatalogStore
from database.connection import apply_catalog_settings


class DatabaseService:
    """Holds the read-only catalog connection shared by request handlers."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize database service.

        Args:
            db_path: Path to database file.
        """
        settings = get_settings()
        self.db_path = db_path or settings.database_path
        self._connection: Optional[duckdb.DuckDBPyConnection] = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """Get or open the shared read-only catalog connection."""
        if self._connection is None:
            self._connection = duckdb.connect(str(self.db_path), read_only=True)
            apply_catalog_settings(self._connection)
        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None


# Global instances
_db_service: Optional[DatabaseService] = None
_facet_catalog: Optional[FacetCatalog] = None


def get_db() -> DatabaseService:
    """Get global database service instance."""
    global _db_service
    if _db_service is None:
        _db_service = DatabaseService()
    return _db_service


def get_store() -> CatalogStore:
    """Get a catalog store over the global connection."""
    return CatalogStore(get_db().connect())


def get_facets() -> FacetCatalog:
    """Get the process-wide facet catalog (shares one option cache)."""
    global _facet_catalog
    if _facet_catalog is None:
        settings = get_settings()
        _facet_catalog = FacetCatalog(
            get_store(),
            TTLCache(
                maxsize=64,
                ttl=settings.cache_ttl_seconds,
                enabled=not settings.debug,
            ),
        )
    return _facet_catalog


def close_db() -> None:
    """Close the global database connection."""
    global _db_service, _facet_catalog
    if _db_service is not None:
        _db_service.close()
    _facet_catalog = None
