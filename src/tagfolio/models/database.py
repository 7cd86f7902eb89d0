"""
DuckDB connection and schema management for the local photo store.
"""

import logging
import threading
from pathlib import Path
from typing import Any

import duckdb

from .schema import REQUIRED_COLUMNS, get_schema_statements

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages a DuckDB connection and the photos schema.

    The connection is shared by every Streamlit session thread, so each
    statement is executed and fetched while holding ``_lock``.
    """

    def __init__(self, db_path: str):
        """
        Initialize DatabaseManager.

        Args:
            db_path: Path to the DuckDB database file, or ":memory:"
        """
        self.db_path = db_path
        self._connection: duckdb.DuckDBPyConnection | None = None
        self._lock = threading.RLock()

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Get or create a database connection.

        Returns:
            DuckDB connection object
        """
        with self._lock:
            if self._connection is None:
                if self.db_path != ":memory:":
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._connection = duckdb.connect(self.db_path)
                logger.info(f"Connected to DuckDB database at {self.db_path}")

            return self._connection

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                logger.info("Closed DuckDB database connection")

    def initialize_schema(self) -> None:
        """
        Create the photos table and its indexes if they don't exist.

        Raises:
            duckdb.Error: If database operations fail
        """
        with self._lock:
            conn = self.connect()

            try:
                for statement in get_schema_statements():
                    logger.debug(f"Executing SQL: {statement}")
                    conn.execute(statement)
                logger.info("Database schema initialized successfully")

            except duckdb.Error as e:
                logger.error(f"Failed to initialize database schema: {e}")
                raise

    def verify_schema(self) -> bool:
        """
        Verify that the photos table exists with every required column.

        Returns:
            True if schema is valid, False otherwise
        """
        try:
            columns = self.execute_query(
                "SELECT column_name FROM information_schema.columns WHERE table_name = 'photos'"
            )
        except duckdb.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False

        column_names = {col[0] for col in columns}

        if not column_names:
            logger.warning("Photos table does not exist")
            return False

        missing_columns = REQUIRED_COLUMNS - column_names
        if missing_columns:
            logger.warning(f"Missing columns: {missing_columns}")
            return False

        return True

    def execute_query(self, query: str, parameters: tuple | list | None = None) -> list[tuple]:
        """
        Execute a SQL query and return results.

        Raises:
            duckdb.Error: If query execution fails
        """
        with self._lock:
            conn = self.connect()

            try:
                if parameters:
                    result = conn.execute(query, parameters)
                else:
                    result = conn.execute(query)

                return result.fetchall()

            except duckdb.Error as e:
                logger.error(f"Query execution failed: {query}, error: {e}")
                raise

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
