"""
db/init_db.py
-------------
Creates the demo schema if it does not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from contextlib import closing

from db.connection import DataSource
from utils.logger import get_logger

logger = get_logger(__name__)

POSTGRES_SCHEMA_SQL = """
-- People table: backs the models.person.Person entity
CREATE TABLE IF NOT EXISTS people (
    id              SERIAL PRIMARY KEY,
    firstname       VARCHAR(100) NOT NULL,
    lastname        VARCHAR(100) NOT NULL,
    age             INT DEFAULT 0
);
"""

SQLITE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS people (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    firstname       TEXT NOT NULL,
    lastname        TEXT NOT NULL,
    age             INTEGER DEFAULT 0
);
"""


def create_tables(data_source: DataSource) -> None:
    """
    Execute the schema SQL matching the data source's backend
    (psycopg2 for pyformat sources, sqlite3 otherwise).
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = data_source.get_connection()
    try:
        with closing(conn.cursor()) as cur:
            if data_source.paramstyle == "pyformat":
                cur.execute(POSTGRES_SCHEMA_SQL)
            else:
                cur.executescript(SQLITE_SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        data_source.release_connection(conn)


if __name__ == "__main__":
    from db.connection import create_data_source
    source = create_data_source()
    try:
        create_tables(source)
    finally:
        source.close()
    print("✅ Database schema created successfully.")
