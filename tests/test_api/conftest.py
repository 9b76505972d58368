"""Pytest fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

import api.services.database as database_service
from api.main import app
from api.services.database import DatabaseService
from catalog.cache import TTLCache
from catalog.facets import FacetCatalog


@pytest.fixture
def client(catalog_db, catalog_store, monkeypatch):
    """Create a TestClient whose database is the seeded in-memory catalog."""
    db = DatabaseService(db_path=":memory:")
    db._connection = catalog_db
    monkeypatch.setattr(database_service, "_db_service", db)
    monkeypatch.setattr(
        database_service,
        "_facet_catalog",
        FacetCatalog(catalog_store, TTLCache(enabled=False)),
    )

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
