"""Filter state for a catalog browsing session.

FilterState is an immutable value: every transition returns a new state.
Changing any facet resets the page to 1; a transition that changes nothing
returns the same state so re-selecting a value keeps the current page.

Values passed to transitions go through the same tolerant coercion used when
decoding URLs, so an unknown price bucket or page size falls back to its
default instead of raising.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from config.constants import (
    DEFAULT_CATEGORY_ID,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_COLUMN,
    DEFAULT_SORT_DIRECTION,
    PAGE_SIZE_OPTIONS,
    SELECTABLE_CATEGORY_IDS,
    SORT_FIELD_MAP,
    get_default_product_types,
)


class PriceRange(str, Enum):
    """Market price buckets."""

    ANY = "any"
    UNDER_5 = "0-5"
    FROM_5_TO_20 = "5-20"
    OVER_20 = "20+"

    @classmethod
    def coerce(cls, value: Any) -> "PriceRange":
        """Map any value to a bucket, falling back to ANY."""
        if isinstance(value, cls):
            return value
        text = str(value).lower()
        # An unescaped "+" in a hand-written URL arrives as a space
        for candidate in (text.strip(), text.replace(" ", "+").strip()):
            try:
                return cls(candidate)
            except ValueError:
                continue
        return cls.ANY


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def coerce(cls, value: Any) -> "SortDirection":
        """Map any value to a direction, falling back to the default."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls(DEFAULT_SORT_DIRECTION)

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


class SortColumn(str, Enum):
    """Sortable columns, valued by their URL (snake_case) spelling."""

    NAME = "name"
    SET_NAME = "set_name"
    MARKET_PRICE = "market_price"
    PREV_MARKET_PRICE = "prev_market_price"
    DIFF_MARKET_PRICE = "diff_market_price"
    DOLLAR_DIFF_MARKET_PRICE = "dollar_diff_market_price"
    UPDATED_AT = "updated_at"

    @classmethod
    def lookup(cls, value: Any) -> Optional["SortColumn"]:
        """Resolve snake_case or camelCase spellings; None when unknown."""
        if isinstance(value, cls):
            return value
        text = str(value).strip() if value is not None else ""
        for url_name, field_name in SORT_FIELD_MAP.items():
            if text in (url_name, field_name):
                return cls(url_name)
        return None

    @classmethod
    def coerce(cls, value: Any) -> "SortColumn":
        """Like lookup, falling back to the default column."""
        return cls.lookup(value) or cls(DEFAULT_SORT_COLUMN)

    @property
    def field_name(self) -> str:
        """Canonical store field name (e.g. diffMarketPrice)."""
        return SORT_FIELD_MAP[self.value]


# =============================================================================
# Coercion helpers (shared with the URL codec)
# =============================================================================

def coerce_category(value: Any) -> int:
    """Map a raw category to a selectable category id, else the default."""
    try:
        category = int(str(value).strip())
    except (TypeError, ValueError):
        return DEFAULT_CATEGORY_ID
    return category if category in SELECTABLE_CATEGORY_IDS else DEFAULT_CATEGORY_ID


def coerce_page(value: Any) -> int:
    """Map a raw page number to an integer >= 1."""
    try:
        page = int(str(value).strip())
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


def coerce_page_size(value: Any) -> int:
    """Map a raw page size to one of the allowed sizes, else the default."""
    try:
        size = int(str(value).strip())
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE
    return size if size in PAGE_SIZE_OPTIONS else DEFAULT_PAGE_SIZE


def coerce_strings(values: Optional[Iterable[Any]]) -> frozenset:
    """Normalize a collection of string facet values, dropping blanks."""
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(s for s in (str(v).strip() for v in values) if s)


def coerce_group_ids(values: Optional[Iterable[Any]]) -> frozenset:
    """Normalize group ids to integers, silently dropping malformed entries."""
    if not values:
        return frozenset()
    if isinstance(values, (str, int)):
        values = [values]
    group_ids = set()
    for value in values:
        try:
            group_ids.add(int(str(value).strip()))
        except (TypeError, ValueError):
            continue
    return frozenset(group_ids)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a requested page to [1, max(1, total_pages)]."""
    return min(max(coerce_page(page), 1), max(1, total_pages))


# =============================================================================
# FilterState
# =============================================================================

@dataclass(frozen=True)
class FilterState:
    """Current facet selection, sort and pagination for one session."""

    category: int = DEFAULT_CATEGORY_ID
    product_types: frozenset = field(
        default_factory=lambda: get_default_product_types(DEFAULT_CATEGORY_ID)
    )
    groups: frozenset = frozenset()
    price_range: PriceRange = PriceRange.ANY
    rarities: frozenset = frozenset()
    search_term: str = ""
    sort_column: SortColumn = SortColumn(DEFAULT_SORT_COLUMN)
    sort_direction: SortDirection = SortDirection(DEFAULT_SORT_DIRECTION)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def default(cls, category: Optional[int] = None) -> "FilterState":
        """Default state for a category."""
        category = coerce_category(category if category is not None else DEFAULT_CATEGORY_ID)
        return cls(category=category, product_types=get_default_product_types(category))

    @property
    def offset(self) -> int:
        """Row offset of the current page."""
        return (self.page - 1) * self.page_size

    @property
    def active_filter_count(self) -> int:
        """Count of active filters beyond category and product type."""
        count = 0
        if self.groups:
            count += 1
        if self.rarities:
            count += 1
        if self.price_range is not PriceRange.ANY:
            count += 1
        if self.search_term:
            count += 1
        return count

    def get_summary(self) -> str:
        """Get a human-readable summary of active filters."""
        parts = [f"Category: {self.category}"]

        if self.product_types:
            parts.append(f"Types: {', '.join(sorted(self.product_types))}")
        if self.groups:
            if len(self.groups) <= 3:
                parts.append(f"Sets: {', '.join(str(g) for g in sorted(self.groups))}")
            else:
                parts.append(f"Sets: {len(self.groups)} selected")
        if self.rarities:
            parts.append(f"Rarities: {', '.join(sorted(self.rarities))}")
        if self.price_range is not PriceRange.ANY:
            parts.append(f"Price: {self.price_range.value}")
        if self.search_term:
            parts.append(f"Search: {self.search_term!r}")

        parts.append(f"Sort: {self.sort_column.value} {self.sort_direction.value}")
        parts.append(f"Page {self.page} ({self.page_size}/page)")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "category": self.category,
            "product_types": sorted(self.product_types),
            "groups": sorted(self.groups),
            "price_range": self.price_range.value,
            "rarities": sorted(self.rarities),
            "search_term": self.search_term,
            "sort_column": self.sort_column.value,
            "sort_direction": self.sort_direction.value,
            "page": self.page,
            "page_size": self.page_size,
        }

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _with_facets(self, **changes: Any) -> "FilterState":
        """Apply facet changes, resetting the page only when something changed."""
        updated = replace(self, **changes)
        if updated == self:
            return self
        return replace(updated, page=1)

    def set_category(self, category: Any) -> "FilterState":
        """Switch category; product types, groups and rarities reset."""
        category = coerce_category(category)
        return self._with_facets(
            category=category,
            product_types=get_default_product_types(category),
            groups=frozenset(),
            rarities=frozenset(),
        )

    def set_groups(self, groups: Optional[Iterable[Any]]) -> "FilterState":
        return self._with_facets(groups=coerce_group_ids(groups))

    def set_product_types(self, product_types: Optional[Iterable[Any]]) -> "FilterState":
        return self._with_facets(product_types=coerce_strings(product_types))

    def set_price_range(self, price_range: Any) -> "FilterState":
        return self._with_facets(price_range=PriceRange.coerce(price_range))

    def set_rarities(self, rarities: Optional[Iterable[Any]]) -> "FilterState":
        return self._with_facets(rarities=coerce_strings(rarities))

    def set_search_term(self, search_term: Optional[str]) -> "FilterState":
        return self._with_facets(search_term=(search_term or "").strip())

    def set_sort(self, column: Any) -> "FilterState":
        """Toggle direction on the same column, otherwise sort ascending by it.

        An unknown column leaves the state unchanged.
        """
        column = SortColumn.lookup(column)
        if column is None:
            return self
        if column is self.sort_column:
            return replace(self, sort_direction=self.sort_direction.flipped(), page=1)
        return replace(self, sort_column=column, sort_direction=SortDirection.ASC, page=1)

    def set_page(self, page: Any) -> "FilterState":
        """Move to a page. Callers clamp against the last result (see clamp_page)."""
        return replace(self, page=coerce_page(page))

    def set_page_size(self, page_size: Any) -> "FilterState":
        return self._with_facets(page_size=coerce_page_size(page_size))

    def reset(self) -> "FilterState":
        """Clear every facet except the category."""
        default = FilterState.default(self.category)
        return self if default == self else default
