"""URL encoding of filter state.

The URL is a projection of FilterState, and the seed of truth on first load.
encode() emits the canonical minimal query string: `category` is always
present, every other key only when it differs from its default, multi-value
facets joined with "," in sorted order. A "," or "%" inside a value is
percent-escaped before joining so any value survives the round trip.
decode() never raises; unknown keys are ignored and invalid values fall back
to defaults so stale or hand-edited URLs degrade instead of breaking.

Parameter names match the read endpoint (category, groups, type, price,
rarity, q, sort_by, sort_dir, limit, page).
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol
from urllib.parse import parse_qs, unquote, urlencode

from config.constants import get_default_product_types
from config.logging_config import get_logger
from browsing.state import (
    FilterState,
    PriceRange,
    SortColumn,
    SortDirection,
    coerce_category,
    coerce_group_ids,
    coerce_page,
    coerce_page_size,
    coerce_strings,
)

logger = get_logger("url_codec")

DELIMITER = ","

PARAM_CATEGORY = "category"
PARAM_GROUPS = "groups"
PARAM_TYPE = "type"
PARAM_PRICE = "price"
PARAM_RARITY = "rarity"
PARAM_SEARCH = "q"
PARAM_SORT_BY = "sort_by"
PARAM_SORT_DIR = "sort_dir"
PARAM_LIMIT = "limit"
PARAM_PAGE = "page"


def _escape(value) -> str:
    return str(value).replace("%", "%25").replace(DELIMITER, "%2C")


def _join(values) -> str:
    return DELIMITER.join(_escape(v) for v in sorted(values))


def _split(value: str) -> List[str]:
    return [unquote(part) for part in value.split(DELIMITER) if part.strip()]


def _first(params: Mapping[str, Any], key: str) -> Optional[str]:
    """Get a single parameter value; lists (from parse_qs) yield their first item."""
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return None if value is None else str(value)


# =============================================================================
# Encoding
# =============================================================================

def to_url_params(state: FilterState) -> Dict[str, str]:
    """
    Convert filter state to minimal URL parameters.

    Args:
        state: FilterState to encode.

    Returns:
        Ordered dict of parameter name to string value.
    """
    default = FilterState.default(state.category)
    params = {PARAM_CATEGORY: str(state.category)}

    if state.groups:
        params[PARAM_GROUPS] = _join(state.groups)
    if state.product_types != default.product_types:
        # An explicitly empty selection is kept as "type=" so it survives decoding
        params[PARAM_TYPE] = _join(state.product_types)
    if state.price_range is not default.price_range:
        params[PARAM_PRICE] = state.price_range.value
    if state.rarities:
        params[PARAM_RARITY] = _join(state.rarities)
    if state.search_term:
        params[PARAM_SEARCH] = state.search_term
    if state.sort_column is not default.sort_column:
        params[PARAM_SORT_BY] = state.sort_column.value
    if state.sort_direction is not default.sort_direction:
        params[PARAM_SORT_DIR] = state.sort_direction.value
    if state.page_size != default.page_size:
        params[PARAM_LIMIT] = str(state.page_size)
    if state.page != default.page:
        params[PARAM_PAGE] = str(state.page)

    return params


def encode(state: FilterState) -> str:
    """Encode filter state as a canonical query string (no leading '?')."""
    return urlencode(to_url_params(state), safe=DELIMITER)


def to_request_params(state: FilterState) -> Dict[str, str]:
    """
    Convert filter state to the full parameter set sent to the read endpoint.

    Unlike the URL form, every field is explicit so the endpoint never has to
    guess a default.
    """
    return {
        PARAM_CATEGORY: str(state.category),
        PARAM_GROUPS: _join(state.groups),
        PARAM_TYPE: _join(state.product_types),
        PARAM_PRICE: state.price_range.value,
        PARAM_RARITY: _join(state.rarities),
        PARAM_SEARCH: state.search_term,
        PARAM_SORT_BY: state.sort_column.value,
        PARAM_SORT_DIR: state.sort_direction.value,
        PARAM_LIMIT: str(state.page_size),
        PARAM_PAGE: str(state.page),
    }


# =============================================================================
# Decoding
# =============================================================================

def from_url_params(params: Mapping[str, Any]) -> FilterState:
    """
    Create filter state from URL parameters.

    Args:
        params: Mapping of parameter name to value (str or list of str).

    Returns:
        FilterState with every missing or invalid field at its default.
    """
    category = coerce_category(_first(params, PARAM_CATEGORY))

    raw_types = _first(params, PARAM_TYPE)
    if raw_types is None:
        product_types = get_default_product_types(category)
    else:
        product_types = coerce_strings(_split(raw_types))

    raw_groups = _first(params, PARAM_GROUPS)
    raw_rarities = _first(params, PARAM_RARITY)

    state = FilterState(
        category=category,
        product_types=product_types,
        groups=coerce_group_ids(_split(raw_groups)) if raw_groups else frozenset(),
        price_range=PriceRange.coerce(_first(params, PARAM_PRICE)),
        rarities=coerce_strings(_split(raw_rarities)) if raw_rarities else frozenset(),
        search_term=(_first(params, PARAM_SEARCH) or "").strip(),
        sort_column=SortColumn.coerce(_first(params, PARAM_SORT_BY)),
        sort_direction=SortDirection.coerce(_first(params, PARAM_SORT_DIR)),
        page=coerce_page(_first(params, PARAM_PAGE)),
        page_size=coerce_page_size(_first(params, PARAM_LIMIT)),
    )
    return state


def decode(query: Optional[str]) -> FilterState:
    """Decode a query string (with or without a leading '?') into filter state."""
    query = (query or "").lstrip("?")
    params = parse_qs(query, keep_blank_values=True)
    return from_url_params(params)


def normalize_query(query: Optional[str]) -> str:
    """Canonical form of any query string."""
    return encode(decode(query))


# =============================================================================
# URL synchronization
# =============================================================================

class Navigator(Protocol):
    """The browser-side URL owner (address bar / router)."""

    def current_query(self) -> str:
        ...

    def replace(self, query: str) -> None:
        ...


class MemoryNavigator:
    """Navigator that keeps the URL in memory (headless sessions, tests)."""

    def __init__(self, query: str = ""):
        self.query = query.lstrip("?")
        self.replace_count = 0

    def current_query(self) -> str:
        return self.query

    def replace(self, query: str) -> None:
        self.query = query.lstrip("?")
        self.replace_count += 1


class UrlSynchronizer:
    """
    Keeps the URL in step with filter state without feedback loops.

    Writes happen only when the encoded state differs from the current query
    string, and always replace the current history entry. Inbound navigation
    that decodes to the state we already hold is treated as our own echo.
    """

    def __init__(self, navigator: Navigator):
        self.navigator = navigator

    def write(self, state: FilterState) -> bool:
        """
        Reflect state into the URL.

        Returns:
            True if the URL was rewritten, False if it already matched.
        """
        encoded = encode(state)
        if encoded == self.navigator.current_query().lstrip("?"):
            return False
        logger.debug(f"Replacing URL query: {encoded}")
        self.navigator.replace(encoded)
        return True

    def read(self) -> FilterState:
        """Decode the navigator's current URL."""
        return decode(self.navigator.current_query())

    def resolve_navigation(self, query: str, current: FilterState) -> Optional[FilterState]:
        """
        Interpret an inbound navigation.

        Returns:
            The new state, or None when the URL already describes `current`.
        """
        navigated = decode(query)
        if navigated == current:
            return None
        return navigated
