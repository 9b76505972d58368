"""Constants for TCG Trends application.

Facet definitions (categories, product types, top-tier rarities, price
buckets, page sizes) are loaded from facets.yaml. Sort and store field names
are fixed here because the catalog schema depends on them.
"""

from typing import Dict, List, Optional, Tuple

from config.config_loader import get_facet_config

_facets = get_facet_config()


# =============================================================================
# Categories and product types
# =============================================================================

CATEGORY_OPTIONS = _facets.categories
SELECTABLE_CATEGORY_IDS: Tuple[int, ...] = tuple(_facets.selectable_category_ids)
DEFAULT_CATEGORY_ID: int = _facets.default_category

PRODUCT_TYPE_OPTIONS: Dict[int, List[Dict[str, str]]] = _facets.product_types

# Every product type valid in at least one category
ALL_PRODUCT_TYPES: frozenset = frozenset(
    option["value"] for options in PRODUCT_TYPE_OPTIONS.values() for option in options
)


def get_product_types(category_id: int) -> List[str]:
    """Get product type values for a category (empty if unknown)."""
    return [option["value"] for option in PRODUCT_TYPE_OPTIONS.get(category_id, [])]


def get_default_product_types(category_id: int) -> frozenset:
    """Get the default product type selection for a category."""
    types = get_product_types(category_id)
    return frozenset(types[:1])


# =============================================================================
# Rarities, prices, pagination
# =============================================================================

TOP_TIER_RARITIES: List[str] = _facets.top_tier_rarities

PRICE_RANGE_OPTIONS: List[Dict[str, str]] = _facets.price_ranges

# Half-open [low, high) bounds; None means unbounded
PRICE_RANGE_BOUNDS: Dict[str, Tuple[float, Optional[float]]] = {
    "0-5": (0, 5),
    "5-20": (5, 20),
    "20+": (20, None),
}

DEFAULT_PAGE_SIZE: int = _facets.default_page_size
PAGE_SIZE_OPTIONS: Tuple[int, ...] = tuple(_facets.page_size_options)


# =============================================================================
# Sorting
# =============================================================================

# Canonical store field names, keyed by the snake_case URL spelling
SORT_FIELD_MAP: Dict[str, str] = {
    "name": "name",
    "set_name": "setName",
    "market_price": "marketPrice",
    "prev_market_price": "prevMarketPrice",
    "diff_market_price": "diffMarketPrice",
    "dollar_diff_market_price": "dollarDiffMarketPrice",
    "updated_at": "updatedAt",
}

DEFAULT_SORT_COLUMN = "diff_market_price"
DEFAULT_SORT_DIRECTION = "desc"

# Sorting DESC on these excludes NULL values
PRICE_DERIVED_FIELDS: frozenset = frozenset({
    "marketPrice",
    "prevMarketPrice",
    "diffMarketPrice",
    "dollarDiffMarketPrice",
})


# =============================================================================
# Restricted preview
# =============================================================================

PREVIEW_PRODUCT_COUNT = 12
PREVIEW_IMAGE_URL = "/images/pkmn-card-back.png"
