"""DuckDB connections to the product catalog."""

import duckdb
from pathlib import Path
from typing import Optional, Union
from contextlib import contextmanager

from config import config
from config.logging_config import get_logger

logger = get_logger("database")

MEMORY = ":memory:"


class DatabaseConnection:
    """Lazily opened connection to a catalog database file.

    Writable connections create the parent directory on first use. The
    catalog is read far more than it is written, so every connection gets
    the configured memory limit and thread count.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None, read_only: bool = False):
        self.db_path = db_path or config.database.path
        self.read_only = read_only
        self._connection: Optional[duckdb.DuckDBPyConnection] = None

    @property
    def in_memory(self) -> bool:
        return str(self.db_path) == MEMORY

    def connect(self) -> duckdb.DuckDBPyConnection:
        if self._connection is None:
            if not (self.in_memory or self.read_only):
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = duckdb.connect(str(self.db_path), read_only=self.read_only)
            apply_catalog_settings(self._connection)
            mode = "read-only" if self.read_only else "read-write"
            logger.info(f"Opened catalog {self.db_path} ({mode})")
        return self._connection

    def execute(self, query: str, parameters: Optional[list] = None):
        return self.connect().execute(query, parameters or [])

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed catalog {self.db_path}")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def apply_catalog_settings(conn: duckdb.DuckDBPyConnection) -> None:
    """Apply memory and thread limits from the database config."""
    conn.execute(f"SET memory_limit = '{config.database.memory_limit}'")
    if config.database.threads > 0:
        conn.execute(f"SET threads = {config.database.threads}")


@contextmanager
def get_connection(db_path: Optional[Union[str, Path]] = None, read_only: bool = False):
    """Yield a catalog connection that is closed on exit.

    Example:
        with get_connection() as conn:
            conn.execute("SELECT COUNT(*) FROM products").fetchone()
    """
    db = DatabaseConnection(db_path, read_only)
    try:
        yield db.connect()
    finally:
        db.close()


def get_memory_connection() -> duckdb.DuckDBPyConnection:
    """In-memory catalog connection, used by tests and fixtures."""
    return duckdb.connect(MEMORY)
