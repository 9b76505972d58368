"""Facet catalog: the option lists a browsing UI offers.

Categories, product types and price buckets come from configuration.
Rarities and set eras are read from the catalog store and cached per
(facet, category) for an hour; caching is off in debug mode.
"""

import unicodedata
from typing import Any, Dict, Iterable, List, Optional

from config import config
from config.constants import (
    CATEGORY_OPTIONS,
    DEFAULT_CATEGORY_ID,
    PRICE_RANGE_OPTIONS,
    PRODUCT_TYPE_OPTIONS,
    TOP_TIER_RARITIES,
)
from config.logging_config import get_logger
from catalog.cache import TTLCache
from catalog.store import CatalogStore

logger = get_logger("facets")


def _collation_key(value: str):
    # Accent- and case-insensitive first, original text breaks ties
    folded = unicodedata.normalize("NFKD", value)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return (folded.casefold(), value)


def order_rarities(values: Iterable[str], top_tier: Optional[List[str]] = None) -> List[str]:
    """
    Order rarity values for display.

    Top-tier rarities that are present come first, in their configured
    order; every other value follows alphabetically. Empty strings are
    dropped.

    Example:
        order_rarities(["Zeta", "Rare", "Foo", "Common"])
        -> ["Common", "Rare", "Foo", "Zeta"]
    """
    top_tier = TOP_TIER_RARITIES if top_tier is None else top_tier
    present = {v for v in values if v}
    head = [r for r in top_tier if r in present]
    tail = sorted((v for v in present if v not in top_tier), key=_collation_key)
    return head + tail


class FacetCatalog:
    """Option lists for every facet of the browser."""

    def __init__(
        self,
        store: CatalogStore,
        cache: Optional[TTLCache] = None,
    ):
        self.store = store
        self.cache = cache or TTLCache(
            maxsize=64,
            ttl=config.app.cache_ttl,
            enabled=config.app.cache_enabled,
        )

    def list_categories(self) -> List[Dict[str, Any]]:
        """Configured categories in display order (disabled ones included)."""
        return [
            {
                "value": c.category_id,
                "label": c.label,
                "image_src": c.image_src,
                "category_id": c.category_id,
                "disabled": c.disabled,
            }
            for c in CATEGORY_OPTIONS
        ]

    def list_types(self, category: int) -> List[Dict[str, str]]:
        """Product types for a category; empty for unknown categories."""
        return [dict(option) for option in PRODUCT_TYPE_OPTIONS.get(category, [])]

    def list_price_ranges(self) -> List[Dict[str, str]]:
        return [dict(option) for option in PRICE_RANGE_OPTIONS]

    def list_rarities(self, category: int) -> List[Dict[str, str]]:
        """Rarities present in a category, top tier first."""
        def load():
            logger.debug(f"Loading rarities for category {category}")
            return order_rarities(self.store.distinct_rarities(category))

        values = self.cache.get_or_set(("rarities", category), load)
        return [{"value": v, "label": v} for v in values]

    def list_set_eras(self, category: int) -> List[Dict[str, Any]]:
        """Sets of a category, newest first. Sub-groups are always empty."""
        def load():
            logger.debug(f"Loading set eras for category {category}")
            return [
                {"value": g["group_id"], "label": g["name"], "subgroups": []}
                for g in self.store.list_groups(category)
            ]

        return self.cache.get_or_set(("set_eras", category), load)

    def get_options(self, category: Optional[int] = None) -> Dict[str, Any]:
        """All option lists for one category."""
        category = DEFAULT_CATEGORY_ID if category is None else category
        return {
            "categories": self.list_categories(),
            "types": self.list_types(category),
            "priceRanges": self.list_price_ranges(),
            "rarities": self.list_rarities(category),
            "setEras": self.list_set_eras(category),
        }
