"""DuckDB-backed catalog store.

Executes compiled StoreQuery objects against the products/product_groups
tables and serves the raw facet sources (rarities and groups per category).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import duckdb

from config.logging_config import get_logger
from database.schema import GROUPS_ALIAS, PRODUCT_SELECT_FIELDS, PRODUCTS_ALIAS
from browsing.query_compiler import (
    OP_CONTAINS,
    OP_EQUAL,
    OP_IN,
    OP_NOT_NULL,
    StoreQuery,
)
from catalog.query_builder import CatalogQueryBuilder

logger = get_logger("catalog_store")


@dataclass
class StorePage:
    """One page of product rows plus the unpaginated match count."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class CatalogStore:
    """Read access to the product catalog."""

    def __init__(self, connection: duckdb.DuckDBPyConnection):
        self.connection = connection

    def _builder(self) -> CatalogQueryBuilder:
        return (
            CatalogQueryBuilder()
            .select("products", PRODUCTS_ALIAS, PRODUCT_SELECT_FIELDS)
            .join(
                "product_groups", GROUPS_ALIAS,
                f"{PRODUCTS_ALIAS}.group_id", f"{GROUPS_ALIAS}.group_id",
            )
        )

    def build_sql(self, query: StoreQuery) -> CatalogQueryBuilder:
        """
        Render a store query into a builder holding the equivalent SQL.

        Raises:
            ValueError: If a clause uses an unknown field or operator.
        """
        builder = self._builder()

        for clause in query.predicate:
            if clause.operator == OP_EQUAL:
                builder.where_equal(clause.field, clause.value)
            elif clause.operator == OP_IN:
                builder.where_in(clause.field, list(clause.value))
            elif clause.operator == OP_CONTAINS:
                builder.where_contains(clause.field, clause.value)
            elif clause.operator == OP_NOT_NULL:
                builder.where_not_null(clause.field)
            else:
                builder.where_compare(clause.field, clause.operator, clause.value)

        builder.order_by(query.order_by.field, desc=query.order_by.descending)
        builder.limit(query.limit).offset(query.offset)
        return builder

    def execute(self, query: StoreQuery) -> StorePage:
        """
        Run a store query.

        Args:
            query: Compiled query.

        Returns:
            StorePage with camelCase product dicts and the total match count.
        """
        builder = self.build_sql(query)
        sql, params = builder.build()
        count_sql, count_params = builder.build_count()

        logger.debug(f"Executing catalog query: {query.describe()}")
        total_count = self.connection.execute(count_sql, count_params).fetchone()[0]

        result = self.connection.execute(sql, params)
        columns = [desc[0] for desc in result.description]
        items = [
            {col: _to_json_value(val) for col, val in zip(columns, row)}
            for row in result.fetchall()
        ]
        return StorePage(items=items, total_count=int(total_count))

    # -------------------------------------------------------------------------
    # Facet sources
    # -------------------------------------------------------------------------

    def distinct_rarities(self, category: int) -> List[str]:
        """Distinct non-empty rarity values of products in a category."""
        rows = self.connection.execute(
            """
            SELECT DISTINCT p.rarity
            FROM products p
            JOIN product_groups g ON p.group_id = g.group_id
            WHERE g.category_id = ?
            AND p.rarity IS NOT NULL
            AND p.rarity != ''
            ORDER BY p.rarity
            """,
            [category],
        ).fetchall()
        return [r[0] for r in rows]

    def list_groups(self, category: int) -> List[Dict[str, Any]]:
        """Groups (sets) of a category, most recently published first."""
        rows = self.connection.execute(
            """
            SELECT group_id, name, abbreviation, published_on
            FROM product_groups
            WHERE category_id = ?
            ORDER BY published_on DESC NULLS LAST, name
            """,
            [category],
        ).fetchall()
        return [
            {
                "group_id": r[0],
                "name": r[1],
                "abbreviation": r[2],
                "published_on": _to_json_value(r[3]),
            }
            for r in rows
        ]

    def count_products(self, category: Optional[int] = None) -> int:
        """Count products, optionally within one category."""
        if category is None:
            return self.connection.execute("SELECT COUNT(*) FROM products").fetchone()[0]
        return self.connection.execute(
            """
            SELECT COUNT(*)
            FROM products p
            JOIN product_groups g ON p.group_id = g.group_id
            WHERE g.category_id = ?
            """,
            [category],
        ).fetchone()[0]
