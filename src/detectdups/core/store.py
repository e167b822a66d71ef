"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/store.py
SQLite-backed persistent hash store.

A single append-only table `hashes (hash TEXT, filename TEXT)` without
uniqueness constraint. Rows accumulate across runs; collapsing them to one
hash per path is done by the Hash Cache when loading.
Transactions are controlled explicitly (autocommit connection + BEGIN/COMMIT).
"""

import logging
import sqlite3
from pathlib import Path
from typing import Iterator, Tuple, Optional

from detectdups.core.interfaces import HashStore
from detectdups.core.exceptions import StoreError

logger = logging.getLogger(__name__)

MEMORY_LOCATION = ":memory:"

_SCHEMA = "CREATE TABLE IF NOT EXISTS hashes (hash TEXT, filename TEXT)"
_SELECT_ALL = "SELECT hash, filename FROM hashes"
_INSERT = "INSERT INTO hashes (hash, filename) VALUES (?, ?)"


class SqliteHashStore(HashStore):
    """
    Durable (hash, filename) table on top of sqlite3.

    Attributes:
        location: Database file path, or ":memory:" for a throwaway store
    """

    def __init__(self, location: str):
        if not location:
            raise StoreError("Store location cannot be empty")
        self.location = location
        self._conn: Optional[sqlite3.Connection] = None
        try:
            if location != MEMORY_LOCATION:
                Path(location).expanduser().parent.mkdir(parents=True, exist_ok=True)
                location = str(Path(location).expanduser())
            # isolation_level=None: no implicit transactions, BEGIN/COMMIT are issued by us
            self._conn = sqlite3.connect(location, isolation_level=None)
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Unable to open hash store '{self.location}': {e}") from e

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None and self._conn.in_transaction

    def create_schema(self) -> None:
        self._execute(_SCHEMA)

    def load_all(self) -> Iterator[Tuple[str, str]]:
        """Yields every (hash, filename) row in insertion order."""
        cursor = self._execute(_SELECT_ALL)
        try:
            for digest, filename in cursor:
                yield digest, filename
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read hash store '{self.location}': {e}") from e
        finally:
            cursor.close()

    def begin(self) -> None:
        self._execute("BEGIN")

    def insert(self, digest: str, filename: str) -> None:
        self._execute(_INSERT, (digest, filename))

    def commit(self) -> None:
        if not self.in_transaction:
            return
        self._execute("COMMIT")

    def count(self) -> int:
        """Number of rows currently visible to this connection."""
        cursor = self._execute("SELECT COUNT(*) FROM hashes")
        try:
            return cursor.fetchone()[0]
        finally:
            cursor.close()

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to close hash store '{self.location}': {e}") from e
        finally:
            self._conn = None

    def _execute(self, sql: str, parameters: Tuple = ()) -> sqlite3.Cursor:
        if self._conn is None:
            raise StoreError(f"Hash store '{self.location}' is closed")
        try:
            return self._conn.execute(sql, parameters)
        except sqlite3.Error as e:
            raise StoreError(f"Hash store '{self.location}' failed on '{sql.split()[0]}': {e}") from e

    def __repr__(self):
        return f"<SqliteHashStore location={self.location}>"
