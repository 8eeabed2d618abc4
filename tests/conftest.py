"""Pytest fixtures for myorm."""
from __future__ import annotations

from pathlib import Path

import pytest

from db.connection import DataSource, SqliteDataSource
from db.init_db import create_tables
from models.person import Person
from persistence import BasicEntityManager


@pytest.fixture()
def data_source(tmp_path: Path):
    source = SqliteDataSource(tmp_path / "test.db")
    create_tables(source)
    try:
        yield source
    finally:
        source.close()


@pytest.fixture()
def manager(data_source):
    return BasicEntityManager.create(data_source, {Person})


@pytest.fixture()
def insert_person(data_source):
    """Insert a row directly, bypassing the entity manager."""
    def _insert(first: str, last: str, age: int = 0) -> int:
        conn = data_source.get_connection()
        try:
            cur = conn.execute(
                "INSERT INTO people (firstname, lastname, age) VALUES (?, ?, ?)",
                (first, last, age),
            )
            conn.commit()
            return cur.lastrowid
        finally:
            data_source.release_connection(conn)
    return _insert


# ── psycopg2 stand-ins ───────────────────────────────────

class FakeCursor:
    def __init__(self, log, error=None):
        self.log = log
        self.error = error
        self.description = None
        self.rowcount = 1

    def execute(self, sql, params=None):
        if self.error is not None:
            raise self.error
        self.log.append((sql, params))

    def fetchone(self):
        return (42,)

    def fetchall(self):
        return []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, error=None):
        self.log = []
        self.error = error
        self.committed = False
        self.rolled_back = False

    def cursor(self):
        return FakeCursor(self.log, self.error)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True


class FakePostgresSource(DataSource):
    """A pyformat data source whose cursors record statements or raise ``error``."""

    paramstyle = "pyformat"
    supports_returning = True

    def __init__(self, error=None):
        self.conn = FakeConnection(error)
        self.released = 0

    def get_connection(self):
        return self.conn

    def release_connection(self, conn):
        self.released += 1


@pytest.fixture()
def pg_source():
    """Factory: ``pg_source()`` records, ``pg_source(exc)`` raises exc on execute."""
    return FakePostgresSource
