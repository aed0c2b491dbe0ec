"""DuckDB connection wrapper with transaction scoping."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import duckdb

from .schema import create_schema, get_connection

logger = logging.getLogger(__name__)


class RepositoriesDatabase:
    """Owns the DuckDB connection backing the repositories store.

    Only one logical owner may drive the connection at a time. Nested
    ``transaction()`` blocks join the outermost one, so recursive work
    (resolving a whole fork chain) commits or rolls back as a unit.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self.conn = conn
        self._depth = 0

    @classmethod
    def open(cls, path: str = ":memory:") -> RepositoriesDatabase:
        """Connect to ``path`` and make sure the schema exists."""
        conn = get_connection(path)
        create_schema(conn)
        logger.info(f"Opened repositories database: {path}")
        return cls(conn)

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self, read_only: bool = False) -> Iterator[duckdb.DuckDBPyConnection]:
        """Run the enclosed block atomically.

        Args:
            read_only: Hint that the block only reads. DuckDB has no lighter
                read transaction, so this only changes logging.
        """
        if self._depth > 0:
            self._depth += 1
            try:
                yield self.conn
            finally:
                self._depth -= 1
            return

        mode = "r" if read_only else "rw"
        logger.debug(f"BEGIN ({mode})")
        self.conn.begin()
        self._depth = 1
        try:
            yield self.conn
        except BaseException:
            self._depth = 0
            logger.debug(f"ROLLBACK ({mode})")
            self.conn.rollback()
            raise
        self._depth = 0
        self.conn.commit()
        logger.debug(f"COMMIT ({mode})")

    def close(self) -> None:
        """Close the underlying connection."""
        self.conn.close()
