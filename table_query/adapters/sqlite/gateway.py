"""
SQLite database gateway.

Executes the SQL built by the table model on a stdlib sqlite3 connection.
"""

import re
import sqlite3
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

import structlog

from table_query.settings import load_settings

logger = structlog.get_logger()


@lru_cache(maxsize=256)
def _like_regex(pattern: str, escape: str) -> "re.Pattern[str]":
    """Compile a LIKE pattern; `escape` makes the next character literal."""
    parts = []
    chars = iter(pattern)
    for ch in chars:
        if ch == escape:
            parts.append(re.escape(next(chars, escape)))
        elif ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _like(pattern: Optional[str], value: Any, escape: str = "\\") -> Optional[bool]:
    """LIKE with backslash as the default escape character, as in MySQL."""
    if pattern is None or value is None:
        return None
    return _like_regex(pattern, escape).fullmatch(str(value)) is not None


class SQLiteGateway:
    """
    Database gateway over sqlite3.

    The connection runs in autocommit mode; `begin_transaction` opens an
    explicit transaction that `commit` or `rollback` closes. LIKE is
    overridden so that backslash escapes % and _ without an ESCAPE clause.
    """

    dialect = "sqlite"

    def __init__(self, database: str = ":memory:", table_prefix: str = ""):
        """
        Initialize SQLite gateway.

        Args:
            database: Path of the database file, or ":memory:"
            table_prefix: Prefix prepended to every logical table name
        """
        self.database = database
        self.table_prefix = table_prefix
        self._connection: Optional[sqlite3.Connection] = None

    @classmethod
    def from_env(cls) -> "SQLiteGateway":
        """Create a gateway from TABLE_QUERY_* environment variables."""
        settings = load_settings()
        return cls(database=settings.sqlite_path, table_prefix=settings.table_prefix)

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self.connect()
        return self._connection

    def connect(self) -> None:
        """Open the database connection."""
        self._connection = sqlite3.connect(self.database, isolation_level=None)
        self._connection.row_factory = sqlite3.Row
        self._connection.create_function("like", 2, _like, deterministic=True)
        self._connection.create_function("like", 3, _like, deterministic=True)
        logger.debug("sqlite_connected", database=self.database)

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def table(self, name: str) -> str:
        return f"{self.table_prefix}{name}"

    def quote(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float)):
            return repr(value)
        if isinstance(value, (bytes, bytearray)):
            return "X'" + bytes(value).hex() + "'"
        return "'" + str(value).replace("'", "''") + "'"

    def _run(self, sql: str, params: Union[tuple, Dict[str, Any]] = ()) -> sqlite3.Cursor:
        logger.debug("sql_executed", sql=sql)
        return self.connection.execute(sql, params)

    def select(self, sql: str) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._run(sql).fetchall()]

    def get_row(self, sql: str) -> Dict[str, Any]:
        row = self._run(sql).fetchone()
        return dict(row) if row is not None else {}

    def get_one(self, sql: str) -> Any:
        row = self._run(sql).fetchone()
        return row[0] if row is not None else None

    def execute(self, sql: str) -> int:
        return self._run(sql).rowcount

    def update(self, sql: str, data: Dict[str, Any]) -> int:
        return self._run(sql, data).rowcount

    def delete(self, sql: str) -> int:
        return self._run(sql).rowcount

    def insert(
        self,
        table: str,
        data: Union[Dict[str, Any], List[Dict[str, Any]]],
        replace: bool = False,
        multi: bool = False,
        ignore: bool = False,
    ) -> Union[int, List[int]]:
        """
        Insert rows with bound parameters.

        Raises:
            ValueError: When both `replace` and `ignore` are requested
        """
        if replace and ignore:
            raise ValueError("replace and ignore cannot be combined")
        verb = "INSERT OR REPLACE" if replace else "INSERT OR IGNORE" if ignore else "INSERT"

        rows = data if multi else [data]
        ids = []
        for row in rows:
            columns = ",".join(f"`{c}`" for c in row)
            placeholders = ",".join(f":{c}" for c in row)
            cursor = self._run(f"{verb} INTO {table} ({columns}) VALUES ({placeholders})", row)
            # a skipped row leaves lastrowid at the previous insert
            ids.append((cursor.lastrowid or 0) if cursor.rowcount > 0 else 0)
        return ids if multi else ids[0]

    @property
    def in_transaction(self) -> bool:
        return self.connection.in_transaction

    def begin_transaction(self) -> None:
        self._run("BEGIN")

    def commit(self) -> None:
        self._run("COMMIT")

    def rollback(self) -> None:
        if self.in_transaction:
            self._run("ROLLBACK")
