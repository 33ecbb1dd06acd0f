"""
Database connection pool for SQLite operations.

Provides connection pooling and transaction management for the usage store.
Writers that need read-modify-write isolation use ``transaction(immediate=True)``,
which takes the database write lock before the first read.
"""

import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Set

from ..exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    """Configuration for database connection pool."""

    max_connections: int = 5
    connection_timeout: float = 30.0
    idle_timeout: float = 300.0  # 5 minutes
    enable_wal_mode: bool = True


class SQLiteConnectionPool:
    """Thread-safe SQLite connection pool."""

    def __init__(self, db_path: str, config: Optional[PoolConfig] = None):
        """Initialize connection pool."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.config = config or PoolConfig()
        self._connections: List[sqlite3.Connection] = []
        self._in_use: Set[sqlite3.Connection] = set()
        self._last_used: Dict[sqlite3.Connection, float] = {}
        self._available = threading.Condition(threading.Lock())

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database settings."""
        with self.get_connection() as conn:
            if self.config.enable_wal_mode:
                conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

    def _create_connection(self) -> sqlite3.Connection:
        """Create a new database connection."""
        # isolation_level=None: transactions are opened explicitly in transaction()
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.config.connection_timeout,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        return conn

    def _get_connection(self) -> sqlite3.Connection:
        """Get a connection from the pool."""
        deadline = time.monotonic() + self.config.connection_timeout
        with self._available:
            self._cleanup_idle_connections()

            while True:
                for conn in self._connections:
                    if conn not in self._in_use:
                        return self._checkout(conn)

                if len(self._connections) < self.config.max_connections:
                    conn = self._create_connection()
                    self._connections.append(conn)
                    return self._checkout(conn)

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise StorageError(
                        f"Could not get connection within {self.config.connection_timeout}s",
                        component="SQLiteConnectionPool",
                    )
                self._available.wait(remaining)

    def _checkout(self, conn: sqlite3.Connection) -> sqlite3.Connection:
        self._in_use.add(conn)
        self._last_used[conn] = time.time()
        return conn

    def _return_connection(self, conn: sqlite3.Connection) -> None:
        """Return a connection to the pool."""
        with self._available:
            if conn in self._in_use:
                self._in_use.remove(conn)
                self._last_used[conn] = time.time()
                self._available.notify()

    def _cleanup_idle_connections(self) -> None:
        """Close connections idle for longer than the idle timeout."""
        current_time = time.time()
        to_remove = [
            conn
            for conn in self._connections
            if conn not in self._in_use
            and current_time - self._last_used.get(conn, 0) > self.config.idle_timeout
        ]

        for conn in to_remove:
            self._connections.remove(conn)
            self._last_used.pop(conn, None)
            try:
                conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing idle connection: {e}")

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a connection from the pool with automatic cleanup."""
        conn = self._get_connection()
        try:
            yield conn
        finally:
            self._return_connection(conn)

    @contextmanager
    def transaction(
        self, immediate: bool = False
    ) -> Generator[sqlite3.Connection, None, None]:
        """Execute operations within a transaction.

        With ``immediate=True`` the write lock is acquired up front, so a
        read followed by a write inside the block cannot interleave with
        another writer.
        """
        with self.get_connection() as conn:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            else:
                conn.execute("COMMIT")

    def close_all(self) -> None:
        """Close all connections in the pool."""
        with self._available:
            for conn in self._connections:
                try:
                    conn.close()
                except sqlite3.Error as e:
                    logger.warning(f"Error closing connection: {e}")

            self._connections.clear()
            self._in_use.clear()
            self._last_used.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get connection pool statistics."""
        with self._available:
            return {
                "total_connections": len(self._connections),
                "in_use_connections": len(self._in_use),
                "available_connections": len(self._connections) - len(self._in_use),
                "max_connections": self.config.max_connections,
            }
