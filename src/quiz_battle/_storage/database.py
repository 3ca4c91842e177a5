# Area: Storage
"""
quiz_battle._storage.database — Database Initialization
=======================================================

Handles SQLite database initialization and connection management
for the durable battle store.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..errors import StoreError

logger = logging.getLogger("quiz_battle.storage.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection(db_path: str = "quiz_battle.db") -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with row factory set
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: str = "quiz_battle.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r") as f:
            schema = f.read()
        conn.executescript(schema)
        conn.commit()
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


class BaseRepository:
    """
    Base class for database repositories.

    Provides common database operations and connection management.
    sqlite3 errors surface as StoreError.
    """

    def __init__(self, db_path: str = "quiz_battle.db"):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return get_connection(self.db_path)

    def _execute(
        self, query: str, params: tuple = (), fetch: bool = False
    ) -> Optional[list]:
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results

        Returns:
            Query results if fetch=True, else None
        """
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StoreError("connect", str(e)) from e
        try:
            cursor = conn.execute(query, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            conn.commit()
            return None
        except sqlite3.Error as e:
            raise StoreError("execute", str(e)) from e
        finally:
            conn.close()

    def _execute_one(self, query: str, params: tuple = ()) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True)
        return results[0] if results else None

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        """
        Run a read-check-write sequence under one write lock.

        Commits on success, rolls back on any exception.
        """
        try:
            conn = self._get_conn()
            conn.isolation_level = None
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise StoreError(operation, str(e)) from e
        try:
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            conn.execute("ROLLBACK")
            raise StoreError(operation, str(e)) from e
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()
