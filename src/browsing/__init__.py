"""Catalog browsing: filter state, URL codec, query compiler and fetching."""

from .errors import ValidationError
from .state import (
    FilterState,
    PriceRange,
    SortColumn,
    SortDirection,
    clamp_page,
)
from .url_codec import (
    MemoryNavigator,
    UrlSynchronizer,
    decode,
    encode,
    from_url_params,
    to_request_params,
    to_url_params,
)
from .query_compiler import Clause, OrderBy, StoreQuery, compile_query
from .orchestrator import (
    AccessLevel,
    FetchOrchestrator,
    FetchStatus,
    QueryResult,
    create_client,
)
from .session import BrowsingSession

__all__ = [
    "ValidationError",
    # State
    "FilterState",
    "PriceRange",
    "SortColumn",
    "SortDirection",
    "clamp_page",
    # URL codec
    "MemoryNavigator",
    "UrlSynchronizer",
    "decode",
    "encode",
    "from_url_params",
    "to_request_params",
    "to_url_params",
    # Compiler
    "Clause",
    "OrderBy",
    "StoreQuery",
    "compile_query",
    # Fetching
    "AccessLevel",
    "FetchOrchestrator",
    "FetchStatus",
    "QueryResult",
    "create_client",
    "BrowsingSession",
]
