"""
Field-aware SQL query builder for the product catalog.

All catalog SQL is built through this module so that:
- Column references come from the schema's field map, never from user input
- Values are always bound as parameters
- The COUNT query shares its WHERE clause with the page query
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from database.schema import FIELD_COLUMNS


@dataclass
class QueryCondition:
    """Represents a WHERE condition."""
    column: str
    operator: str
    value: Any
    is_list: bool = False

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Convert to SQL condition with parameter placeholders."""
        if self.is_list and isinstance(self.value, (list, tuple)):
            placeholders = ", ".join(["?" for _ in self.value])
            return f"{self.column} {self.operator} ({placeholders})", list(self.value)

        return f"{self.column} {self.operator} ?", [self.value]


class CatalogQueryBuilder:
    """
    SQL query builder that resolves fields through the catalog field map.

    Usage:
        builder = CatalogQueryBuilder()
        query, params = (
            builder
            .select("products", "p", ["id", "name", "marketPrice"])
            .join("product_groups", "g", "p.group_id", "g.group_id")
            .where_equal("category", 3)
            .where_in("rarity", ["Rare"])
            .order_by("marketPrice", desc=True)
            .paginate(2, 25)
            .build()
        )
    """

    def __init__(self, field_columns: Optional[Dict[str, str]] = None):
        self.field_columns = field_columns or FIELD_COLUMNS
        self._reset()

    def _reset(self):
        """Reset builder state for new query."""
        self._table: Optional[str] = None
        self._table_alias: Optional[str] = None
        self._columns: List[str] = []
        self._conditions: List[QueryCondition] = []
        self._condition_strings: List[str] = []
        self._params: List[Any] = []
        self._joins: List[str] = []
        self._order_by: List[str] = []
        self._limit_val: Optional[int] = None
        self._offset_val: Optional[int] = None

    def column(self, field: str) -> str:
        """
        Resolve a field name to its SQL column.

        Raises:
            ValueError: If the field is not part of the catalog schema.
        """
        try:
            return self.field_columns[field]
        except KeyError:
            raise ValueError(f"Unknown catalog field: {field}")

    def select(self, table: str, table_alias: str,
               fields: List[str]) -> "CatalogQueryBuilder":
        """
        Start a SELECT query on a table.

        Args:
            table: Table name
            table_alias: Alias used by the field map for this table
            fields: Catalog field names to select

        Returns:
            Self for chaining
        """
        self._reset()
        self._table = table
        self._table_alias = table_alias
        self._columns = [f"{self.column(f)} AS {f}" for f in fields]
        return self

    def join(self, join_table: str, join_alias: str,
             on_left: str, on_right: str,
             join_type: str = "JOIN") -> "CatalogQueryBuilder":
        """Add a JOIN clause on fully qualified columns."""
        self._joins.append(f"{join_type} {join_table} {join_alias} ON {on_left} = {on_right}")
        return self

    # -------------------------------------------------------------------------
    # WHERE Conditions
    # -------------------------------------------------------------------------

    def where_equal(self, field: str, value: Any) -> "CatalogQueryBuilder":
        """Add WHERE field = value condition."""
        self._conditions.append(QueryCondition(self.column(field), "=", value))
        return self

    def where_in(self, field: str, values: List[Any]) -> "CatalogQueryBuilder":
        """Add WHERE field IN (...) condition."""
        if not values:
            return self

        self._conditions.append(QueryCondition(
            column=self.column(field),
            operator="IN",
            value=list(values),
            is_list=True,
        ))
        return self

    def where_contains(self, field: str, text: str) -> "CatalogQueryBuilder":
        """Add a case-insensitive substring condition."""
        # Wildcards in the search text match literally
        escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        self._condition_strings.append(f"{self.column(field)} ILIKE ? ESCAPE '\\'")
        self._params.append(f"%{escaped}%")
        return self

    def where_compare(self, field: str, operator: str, value: Any) -> "CatalogQueryBuilder":
        """Add WHERE field <op> value for a range operator."""
        if operator not in (">", ">=", "<", "<="):
            raise ValueError(f"Unsupported comparison operator: {operator}")
        self._conditions.append(QueryCondition(self.column(field), operator, value))
        return self

    def where_not_null(self, field: str) -> "CatalogQueryBuilder":
        """Add WHERE field IS NOT NULL condition."""
        self._condition_strings.append(f"{self.column(field)} IS NOT NULL")
        return self

    # -------------------------------------------------------------------------
    # ORDER BY, LIMIT
    # -------------------------------------------------------------------------

    def order_by(self, field: str, desc: bool = False) -> "CatalogQueryBuilder":
        """Add ORDER BY clause."""
        direction = "DESC" if desc else "ASC"
        self._order_by.append(f"{self.column(field)} {direction}")
        return self

    def limit(self, limit: int) -> "CatalogQueryBuilder":
        """Add LIMIT clause."""
        self._limit_val = limit
        return self

    def offset(self, offset: int) -> "CatalogQueryBuilder":
        """Add OFFSET clause."""
        self._offset_val = offset
        return self

    def paginate(self, page: int, page_size: int) -> "CatalogQueryBuilder":
        """Add pagination (LIMIT and OFFSET)."""
        self._limit_val = page_size
        self._offset_val = (page - 1) * page_size
        return self

    # -------------------------------------------------------------------------
    # Build Methods
    # -------------------------------------------------------------------------

    def _from_and_where(self) -> Tuple[List[str], List[Any]]:
        table_clause = f"{self._table} {self._table_alias}" if self._table_alias else self._table
        parts = [f"FROM {table_clause}"]
        parts.extend(self._joins)

        all_conditions = []
        all_params = []

        for cond in self._conditions:
            sql, params = cond.to_sql()
            all_conditions.append(sql)
            all_params.extend(params)

        all_conditions.extend(self._condition_strings)
        all_params.extend(self._params)

        if all_conditions:
            parts.append(f"WHERE {' AND '.join(all_conditions)}")

        return parts, all_params

    def build(self) -> Tuple[str, List[Any]]:
        """
        Build the final SQL query and parameters.

        Returns:
            Tuple of (sql_query, parameters)
        """
        if not self._table:
            raise ValueError("No table specified. Call select() first.")

        select_cols = ", ".join(self._columns) if self._columns else "*"
        from_parts, params = self._from_and_where()
        parts = [f"SELECT {select_cols}", *from_parts]

        if self._order_by:
            parts.append(f"ORDER BY {', '.join(self._order_by)}")

        if self._limit_val is not None:
            parts.append(f"LIMIT {int(self._limit_val)}")
        if self._offset_val is not None:
            parts.append(f"OFFSET {int(self._offset_val)}")

        return "\n".join(parts), params

    def build_count(self) -> Tuple[str, List[Any]]:
        """
        Build a COUNT(*) query using the same conditions.

        Returns:
            Tuple of (count_query, parameters)
        """
        if not self._table:
            raise ValueError("No table specified. Call select() first.")

        from_parts, params = self._from_and_where()
        return "\n".join(["SELECT COUNT(*) AS count", *from_parts]), params
