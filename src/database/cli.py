"""
Catalog database setup command.

Creates the catalog schema and optionally loads a JSON snapshot of groups
and products exported from the pricing pipeline.

Usage:
    tcg-init-db [--db PATH] [--load PATH] [--log-level LEVEL]

Snapshot format:
    {"groups": [{"group_id": 1, "name": "...", "category_id": 3, ...}],
     "products": [{"id": 1, "product_id": 10, "name": "...", ...}]}
"""

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import duckdb

from config import config
from config.logging_config import get_logger, setup_logging
from database.connection import get_connection
from database.schema import get_table_counts, initialize_database

logger = get_logger("database_cli")

GROUP_COLUMNS = ["group_id", "name", "abbreviation", "category_id", "published_on"]
PRODUCT_COLUMNS = [
    "id", "product_id", "name", "clean_name", "sub_type_name", "product_type",
    "rarity", "group_id", "image_url", "url", "market_price", "prev_market_price",
    "diff_market_price", "dollar_diff_market_price", "updated_at",
]


def _insert_rows(conn: duckdb.DuckDBPyConnection, table: str,
                 columns: List[str], rows: List[Dict[str, Any]]) -> int:
    if not rows:
        return 0
    placeholders = ", ".join("?" for _ in columns)
    conn.executemany(
        f"INSERT OR REPLACE INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
        [[row.get(col) for col in columns] for row in rows],
    )
    return len(rows)


def load_snapshot(conn: duckdb.DuckDBPyConnection, snapshot: Dict[str, Any]) -> Dict[str, int]:
    """
    Load groups and products from a snapshot dict.

    Returns:
        Number of rows written per table.
    """
    return {
        "product_groups": _insert_rows(
            conn, "product_groups", GROUP_COLUMNS, snapshot.get("groups", [])
        ),
        "products": _insert_rows(
            conn, "products", PRODUCT_COLUMNS, snapshot.get("products", [])
        ),
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the TCG Trends catalog database")
    parser.add_argument("--db", type=Path, default=None, help="Database path")
    parser.add_argument("--load", type=Path, default=None, help="JSON snapshot to load")
    parser.add_argument("--log-level", default=config.app.log_level, help="Logging level")
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)
    db_path = args.db or config.database.path

    with get_connection(db_path) as conn:
        initialize_database(conn)

        if args.load:
            with open(args.load, encoding="utf-8") as f:
                snapshot = json.load(f)
            written = load_snapshot(conn, snapshot)
            logger.info(
                f"Loaded {written['product_groups']} groups and "
                f"{written['products']} products from {args.load}"
            )

        for table, count in get_table_counts(conn).items():
            logger.info(f"{table}: {count:,} rows")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
