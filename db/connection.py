"""
db/connection.py
----------------
Data sources the entity manager acquires connections from.

A data source hands out one connection per call and takes it back when the
caller is done. PostgreSQL connections come from psycopg2's
SimpleConnectionPool; SQLite opens a fresh connection each time.
"""

import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_BACKEND, DB_POOL_MAX, DB_POOL_MIN, SQLITE_PATH
from utils.logger import get_logger

logger = get_logger(__name__)


class DataSource(ABC):
    """
    Generic source of DB-API connections.

    Attributes:
        paramstyle: DB-API paramstyle of the underlying driver.
        supports_returning: Whether INSERT ... RETURNING is used to read
            back generated keys.
    """

    paramstyle: str = "named"
    supports_returning: bool = False

    @abstractmethod
    def get_connection(self):
        """Acquire a connection."""

    @abstractmethod
    def release_connection(self, conn) -> None:
        """Give back a connection obtained from get_connection()."""

    def close(self) -> None:
        """Release every resource held by the data source."""


class PostgresDataSource(DataSource):
    """PostgreSQL data source backed by a psycopg2 connection pool."""

    paramstyle = "pyformat"
    supports_returning = True

    def __init__(self, dsn: str = DATABASE_URL, min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX):
        """
        Initialize the connection pool.

        Args:
            dsn: libpq connection string or URL.
            min_conn: Minimum number of connections to keep open.
            max_conn: Maximum number of connections allowed.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        try:
            self._pool: pool.SimpleConnectionPool | None = pool.SimpleConnectionPool(min_conn, max_conn, dsn)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def get_connection(self):
        """
        Get a connection from the pool.

        Raises:
            RuntimeError: If the pool has been closed.
        """
        if self._pool is None:
            raise RuntimeError("Database pool is closed.")
        return self._pool.getconn()

    def release_connection(self, conn) -> None:
        if self._pool is not None:
            self._pool.putconn(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")


class SqliteDataSource(DataSource):
    """SQLite data source opening a new connection for every call."""

    paramstyle = "named"
    # RETURNING needs SQLite 3.35+; older libraries fall back to lastrowid
    supports_returning = sqlite3.sqlite_version_info >= (3, 35, 0)

    def __init__(self, path: str | Path = SQLITE_PATH):
        self.path = Path(path)
        logger.info(f"SQLite data source at {self.path}")

    def get_connection(self):
        conn = sqlite3.connect(self.path)
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn

    def release_connection(self, conn) -> None:
        conn.close()


def create_data_source() -> DataSource:
    """
    Build the data source selected by the DB_BACKEND setting.

    Raises:
        ValueError: If DB_BACKEND names an unknown backend.
    """
    if DB_BACKEND == "postgres":
        return PostgresDataSource()
    if DB_BACKEND == "sqlite":
        return SqliteDataSource()
    raise ValueError(f"Unknown DB_BACKEND '{DB_BACKEND}' (expected 'postgres' or 'sqlite')")
