"""Product catalog: store access, SQL building and facet options."""

from .cache import TTLCache
from .query_builder import CatalogQueryBuilder
from .store import CatalogStore, StorePage
from .facets import FacetCatalog, order_rarities

__all__ = [
    "TTLCache",
    "CatalogQueryBuilder",
    "CatalogStore",
    "StorePage",
    "FacetCatalog",
    "order_rarities",
]
