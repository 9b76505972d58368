"""DuckDB schema definitions for the TCG product catalog.

Two tables back the catalog browser:
- product_groups: sets/eras, each belonging to one game category
- products: priced items (singles and sealed products) with daily price diffs
"""

from typing import Optional
import duckdb

from config.logging_config import get_logger

logger = get_logger("schema")

# Schema version for migrations
SCHEMA_VERSION = "1.0"

# =============================================================================
# CONSTRAINT NOTES
# =============================================================================
# DuckDB does not enforce foreign key constraints but allows them for
# documentation and query optimization hints.
#
# Key Relationships:
# - products.group_id -> product_groups.group_id
# - product_groups.category_id -> configured category ids (facets.yaml)
#
# Price columns:
# - diff_market_price is a fraction (0.25 == +25%), NULL when no prior price
# - dollar_diff_market_price = market_price - prev_market_price
# =============================================================================

CREATE_PRODUCT_GROUPS = """
CREATE TABLE IF NOT EXISTS product_groups (
    group_id INTEGER PRIMARY KEY,
    name VARCHAR NOT NULL,
    abbreviation VARCHAR,
    category_id INTEGER NOT NULL,
    published_on DATE
)
"""

CREATE_PRODUCTS = """
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY,
    product_id INTEGER NOT NULL,
    name VARCHAR,
    clean_name VARCHAR,
    sub_type_name VARCHAR,
    product_type VARCHAR,
    rarity VARCHAR,
    group_id INTEGER,
    image_url VARCHAR,
    url VARCHAR,
    market_price DECIMAL(12, 2),
    prev_market_price DECIMAL(12, 2),
    diff_market_price DECIMAL(12, 6),
    dollar_diff_market_price DECIMAL(12, 2),
    updated_at TIMESTAMP
)
"""

CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version VARCHAR PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_groups_category ON product_groups(category_id)",
    "CREATE INDEX IF NOT EXISTS idx_products_group ON products(group_id)",
    "CREATE INDEX IF NOT EXISTS idx_products_type ON products(product_type)",
    "CREATE INDEX IF NOT EXISTS idx_products_rarity ON products(rarity)",
]

# =============================================================================
# FIELD -> COLUMN MAPPING
# =============================================================================
# Store queries address fields by their canonical (camelCase) name. The
# catalog query always selects FROM products p JOIN product_groups g.

PRODUCTS_ALIAS = "p"
GROUPS_ALIAS = "g"

FIELD_COLUMNS = {
    "id": "p.id",
    "productId": "p.product_id",
    "name": "p.name",
    "cleanName": "p.clean_name",
    "subTypeName": "p.sub_type_name",
    "productType": "p.product_type",
    "rarity": "p.rarity",
    "groupId": "p.group_id",
    "imageUrl": "p.image_url",
    "url": "p.url",
    "marketPrice": "p.market_price",
    "prevMarketPrice": "p.prev_market_price",
    "diffMarketPrice": "p.diff_market_price",
    "dollarDiffMarketPrice": "p.dollar_diff_market_price",
    "updatedAt": "p.updated_at",
    "setName": "g.name",
    "category": "g.category_id",
}

# Columns returned for each product row, in select order
PRODUCT_SELECT_FIELDS = [
    "id",
    "productId",
    "name",
    "cleanName",
    "subTypeName",
    "productType",
    "rarity",
    "groupId",
    "setName",
    "category",
    "imageUrl",
    "url",
    "marketPrice",
    "prevMarketPrice",
    "diffMarketPrice",
    "dollarDiffMarketPrice",
    "updatedAt",
]


def create_all_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """
    Create all catalog tables.

    Args:
        conn: DuckDB connection.
    """
    conn.execute(CREATE_SCHEMA_VERSION)
    conn.execute(CREATE_PRODUCT_GROUPS)
    conn.execute(CREATE_PRODUCTS)
    logger.info("Catalog tables created")


def create_all_indexes(conn: duckdb.DuckDBPyConnection) -> None:
    """Create all indexes for query performance."""
    for index_sql in INDEXES:
        conn.execute(index_sql)
    logger.info("Catalog indexes created")


def initialize_database(conn: duckdb.DuckDBPyConnection) -> None:
    """
    Initialize the database with schema and indexes.

    Args:
        conn: DuckDB connection.
    """
    create_all_tables(conn)
    create_all_indexes(conn)

    conn.execute(
        "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
        [SCHEMA_VERSION],
    )
    logger.info(f"Database initialized with schema version {SCHEMA_VERSION}")


def get_schema_version(conn: duckdb.DuckDBPyConnection) -> Optional[str]:
    """
    Get the current schema version.

    Returns:
        Schema version string or None if not initialized.
    """
    try:
        result = conn.execute(
            "SELECT version FROM schema_version ORDER BY applied_at DESC LIMIT 1"
        ).fetchone()
        return result[0] if result else None
    except duckdb.CatalogException:
        return None


def get_table_counts(conn: duckdb.DuckDBPyConnection) -> dict:
    """
    Get row counts for the catalog tables.

    Returns:
        Dictionary of table name to row count (-1 if the table is missing).
    """
    counts = {}
    for table in ("product_groups", "products"):
        try:
            counts[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        except duckdb.CatalogException:
            counts[table] = -1
    return counts
