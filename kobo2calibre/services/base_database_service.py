"""
Base Database Service Module

This module provides shared database utilities and connection management
for the Kobo and Calibre database services.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

# Configure logger for this module
logger = logging.getLogger(__name__)


class BaseDatabaseService:
    """
    Base class providing shared database utilities and connection management.

    Both databases belong to other applications (the Kobo firmware and
    Calibre), so nothing here creates files or schema: the database must
    already exist.
    """

    def __init__(self, db_path: str, read_only: bool = False):
        """
        Initialize the base database service.

        Args:
            db_path (str): Path to an existing SQLite database file
            read_only (bool): Open connections in read-only mode
        """
        self.db_path = db_path
        self.read_only = read_only

    def exists(self) -> bool:
        return Path(self.db_path).is_file()

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """
        Context manager for database connections.

        Yields:
            sqlite3.Connection: Connection with ``sqlite3.Row`` rows, closed on exit
        """
        if self.read_only:
            uri = f"{Path(self.db_path).resolve().as_uri()}?mode=ro"
            conn = sqlite3.connect(uri, uri=True)
        else:
            conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def execute_query(
        self,
        query: str,
        params: tuple = (),
        fetch_one: bool = False,
        fetch_all: bool = False,
    ) -> Any:
        """
        Execute a read query with error handling.

        Args:
            query (str): SQL query to execute
            params (tuple): Query parameters
            fetch_one (bool): Whether to fetch one result
            fetch_all (bool): Whether to fetch all results

        Returns:
            Any: Query result or None if error occurred
        """
        try:
            with self.get_connection() as conn:
                cursor = conn.execute(query, params)

                if fetch_one:
                    return cursor.fetchone()
                elif fetch_all:
                    return cursor.fetchall()
                return None
        except Exception as e:
            logger.error(f"Database query error: {e}")
            return None

    def execute_write(self, query: str, params: tuple) -> Optional[int]:
        """
        Execute an INSERT or UPDATE query and commit it.

        Unlike reads, write errors propagate: a failed write must not be
        counted as a stored highlight.

        Returns:
            Optional[int]: Last row ID of the statement
        """
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.lastrowid
