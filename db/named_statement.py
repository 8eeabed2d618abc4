"""
db/named_statement.py
---------------------
Thin prepared-statement helper accepting ``:name`` placeholders.

Statements are written once with named placeholders and rewritten into the
paramstyle of the data source's driver (``%(name)s`` for psycopg2, ``:name``
for sqlite3). Every execution acquires its own connection and releases it
afterwards.
"""

from contextlib import closing
from typing import Any, Mapping

from db.connection import DataSource
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_named_sql(sql: str, paramstyle: str = "pyformat") -> tuple[str, list[str]]:
    """
    Rewrite ``:name`` placeholders into the given DB-API paramstyle.

    Placeholders inside quoted literals, ``--`` line comments and PostgreSQL
    ``::`` casts are left untouched. For ``pyformat`` every literal ``%`` is doubled so the result
    is safe for ``%``-style substitution; ``named`` keeps the text as is.

    Returns:
        (sql, names) where names lists each distinct parameter in order of
        first appearance.
    """
    if paramstyle not in ("pyformat", "named"):
        raise ValueError(f"Unsupported paramstyle '{paramstyle}'")
    percent = "%%" if paramstyle == "pyformat" else "%"
    out: list[str] = []
    names: list[str] = []
    quote: str | None = None
    i, n = 0, len(sql)
    while i < n:
        ch = sql[i]
        if quote:
            out.append(percent if ch == "%" else ch)
            if ch == quote:
                quote = None
            i += 1
        elif ch in ("'", '"'):
            quote = ch
            out.append(ch)
            i += 1
        elif ch == "%":
            out.append(percent)
            i += 1
        elif ch == "-" and sql.startswith("--", i):
            # line comment: copied up to the newline, never parsed
            end = sql.find("\n", i)
            end = n if end == -1 else end
            out.append(sql[i:end].replace("%", percent))
            i = end
        elif ch == ":" and i + 1 < n and sql[i + 1] == ":":
            out.append("::")
            i += 2
        elif ch == ":" and i + 1 < n and (sql[i + 1].isalpha() or sql[i + 1] == "_"):
            j = i + 1
            while j < n and (sql[j].isalnum() or sql[j] == "_"):
                j += 1
            name = sql[i + 1:j]
            if name not in names:
                names.append(name)
            out.append(f"%({name})s" if paramstyle == "pyformat" else f":{name}")
            i = j
        else:
            out.append(ch)
            i += 1
    return "".join(out), names


class NamedPreparedStatement:
    """A statement with named parameters bound against a data source."""

    def __init__(self, data_source: DataSource, sql: str):
        self.data_source = data_source
        self.sql = sql
        self.driver_sql, self.parameter_names = parse_named_sql(sql, data_source.paramstyle)
        self._parameters: dict[str, Any] = {}

    @classmethod
    def prepare(cls, data_source: DataSource, sql: str) -> "NamedPreparedStatement":
        return cls(data_source, sql)

    def set_parameter(self, name: str, value: Any) -> "NamedPreparedStatement":
        self._parameters[name] = value
        return self

    def set_parameters(self, parameters: Mapping[str, Any]) -> "NamedPreparedStatement":
        self._parameters.update(parameters)
        return self

    def _bound_parameters(self) -> dict[str, Any]:
        missing = [name for name in self.parameter_names if name not in self._parameters]
        if missing:
            raise KeyError(f"Missing value for parameter(s): {', '.join(missing)}")
        return {name: self._parameters[name] for name in self.parameter_names}

    def _run(self, sql: str, fetch, commit: bool):
        params = self._bound_parameters()
        logger.debug(f"Executing: {sql} | {params}")
        conn = self.data_source.get_connection()
        try:
            with closing(conn.cursor()) as cur:
                cur.execute(sql, params)
                result = fetch(cur)
            if commit:
                conn.commit()
            return result
        except Exception:
            conn.rollback()
            raise
        finally:
            self.data_source.release_connection(conn)

    # ── EXECUTION ─────────────────────────────────────────

    def execute_query(self) -> tuple[list[str], list[tuple]]:
        """
        Run a SELECT.

        Returns:
            (column names, rows) as reported by the driver cursor.
        """
        def fetch(cur):
            columns = [d[0] for d in cur.description or ()]
            return columns, [tuple(r) for r in cur.fetchall()]

        return self._run(self.driver_sql, fetch, commit=False)

    def execute_update(self) -> int:
        """Run an UPDATE/DELETE/DDL statement and return the affected row count."""
        return self._run(self.driver_sql, lambda cur: cur.rowcount, commit=True)

    def execute_insert(self, id_column: str) -> Any:
        """
        Run an INSERT and return the identity value the database generated.

        Uses ``RETURNING <id_column>`` when the data source supports it.
        Otherwise the cursor's ``lastrowid`` is returned, which on SQLite is
        the rowid and equals the identity only for ``INTEGER PRIMARY KEY``
        columns.

        Args:
            id_column: Column holding the generated key.
        """
        sql = self.driver_sql
        if self.data_source.supports_returning:
            sql = f"{sql.rstrip().rstrip(';')} RETURNING {id_column}"
            return self._run(sql, lambda cur: cur.fetchone()[0], commit=True)
        return self._run(sql, lambda cur: cur.lastrowid, commit=True)
