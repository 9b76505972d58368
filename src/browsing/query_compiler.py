"""
Query compiler for catalog browsing.

Turns a FilterState into a single store query: an ANDed predicate, a
single-column ordering, and offset/limit pagination. The store query is
engine-neutral; fields are addressed by their canonical names and
src/catalog/store.py renders them to SQL.

Predicate clauses are emitted in a fixed order:
    1. category scoping (through the product's group)
    2. product types
    3. rarities
    4. case-insensitive name substring
    5. groups
    6. price bucket
    7. NOT NULL on the sort column for DESC sorts on price-derived fields

Only an unknown product type is a hard failure (ValidationError). Anything
else that does not resolve (e.g. a sort column outside the allow-list) falls
back to a default.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from config.constants import (
    ALL_PRODUCT_TYPES,
    DEFAULT_SORT_COLUMN,
    PRICE_DERIVED_FIELDS,
    PRICE_RANGE_BOUNDS,
    SORT_FIELD_MAP,
)
from config.logging_config import get_logger
from browsing.errors import ValidationError
from browsing.state import FilterState, PriceRange, SortColumn, SortDirection

logger = get_logger("query_compiler")

# Both the canonical field names and the legacy snake_case spellings
SORT_COLUMN_ALLOW_LIST = {
    **{field_name: field_name for field_name in SORT_FIELD_MAP.values()},
    **SORT_FIELD_MAP,
}

DEFAULT_SORT_FIELD = SORT_FIELD_MAP[DEFAULT_SORT_COLUMN]


# Clause operators
OP_EQUAL = "="
OP_IN = "IN"
OP_CONTAINS = "CONTAINS"
OP_GTE = ">="
OP_LT = "<"
OP_NOT_NULL = "IS NOT NULL"


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Clause:
    """One predicate term on a store field."""

    field: str
    operator: str
    value: Any = None

    def describe(self) -> str:
        """Readable form, e.g. `productType IN ("card")`."""
        if self.operator == OP_NOT_NULL:
            return f"{self.field} IS NOT NULL"
        if self.operator == OP_IN:
            values = ", ".join(_format_value(v) for v in self.value)
            return f"{self.field} IN ({values})"
        if self.operator == OP_CONTAINS:
            return f"{self.field} CONTAINS {_format_value(self.value)}"
        return f"{self.field}{self.operator}{_format_value(self.value)}"


@dataclass(frozen=True)
class OrderBy:
    """Single-column ordering. Ties stay in store-native order."""

    field: str
    descending: bool

    def describe(self) -> str:
        return f"{self.field} {'DESC' if self.descending else 'ASC'}"


@dataclass(frozen=True)
class StoreQuery:
    """A compiled catalog query."""

    predicate: Tuple[Clause, ...]
    order_by: OrderBy
    offset: int
    limit: int

    def describe(self) -> str:
        """Readable rendering for logs and debugging."""
        where = " AND ".join(clause.describe() for clause in self.predicate)
        return f"{where} ORDER BY {self.order_by.describe()} OFFSET {self.offset} LIMIT {self.limit}"

    def clauses_for(self, field: str) -> Tuple[Clause, ...]:
        """All clauses that constrain a given field."""
        return tuple(clause for clause in self.predicate if clause.field == field)


def resolve_sort_field(column: Union[str, SortColumn, None]) -> str:
    """
    Resolve a requested sort column to a canonical store field.

    Accepts canonical (marketPrice) and legacy (market_price) spellings;
    anything else resolves to the default sort field.
    """
    if isinstance(column, SortColumn):
        return column.field_name
    if column is None:
        return DEFAULT_SORT_FIELD
    return SORT_COLUMN_ALLOW_LIST.get(str(column).strip(), DEFAULT_SORT_FIELD)


def validate_product_types(product_types) -> None:
    """
    Raise ValidationError if any product type is unknown to every category.

    Args:
        product_types: Requested product type values.
    """
    invalid = sorted(t for t in product_types if t not in ALL_PRODUCT_TYPES)
    if invalid:
        raise ValidationError(
            f"Invalid product type provided in {', '.join(sorted(product_types))}"
        )


def _price_clauses(price_range: PriceRange) -> Tuple[Clause, ...]:
    bounds: Optional[tuple] = PRICE_RANGE_BOUNDS.get(price_range.value)
    if bounds is None:
        return ()
    low, high = bounds
    clauses = [Clause("marketPrice", OP_GTE, low)]
    if high is not None:
        clauses.append(Clause("marketPrice", OP_LT, high))
    return tuple(clauses)


def compile_query(state: FilterState, sort_column: Union[str, SortColumn, None] = None) -> StoreQuery:
    """
    Compile a filter state into a store query.

    Args:
        state: Fully resolved filter state.
        sort_column: Optional raw sort column overriding state.sort_column.

    Returns:
        StoreQuery with predicate, ordering and pagination.

    Raises:
        ValidationError: If a product type is not offered by any category.
    """
    validate_product_types(state.product_types)

    sort_field = resolve_sort_field(sort_column if sort_column is not None else state.sort_column)
    descending = state.sort_direction is SortDirection.DESC

    predicate = [Clause("category", OP_EQUAL, state.category)]

    if state.product_types:
        predicate.append(Clause("productType", OP_IN, tuple(sorted(state.product_types))))

    if state.rarities:
        predicate.append(Clause("rarity", OP_IN, tuple(sorted(state.rarities))))

    if state.search_term:
        predicate.append(Clause("name", OP_CONTAINS, state.search_term))

    if state.groups:
        predicate.append(Clause("groupId", OP_IN, tuple(sorted(state.groups))))

    predicate.extend(_price_clauses(state.price_range))

    # NULLs sort ambiguously at the tail of a DESC order; drop them for a stable top-N
    if sort_field in PRICE_DERIVED_FIELDS and descending:
        predicate.append(Clause(sort_field, OP_NOT_NULL))

    query = StoreQuery(
        predicate=tuple(predicate),
        order_by=OrderBy(sort_field, descending),
        offset=(state.page - 1) * state.page_size,
        limit=state.page_size,
    )
    logger.debug(f"Compiled query: {query.describe()}")
    return query
