"""
MySQL database gateway.

Executes the SQL built by the table model through PyMySQL.
"""

import re
from typing import Any, Dict, List, Optional, Union

import pymysql
import pymysql.cursors
import structlog

from table_query.settings import load_settings

logger = structlog.get_logger()

# :name placeholders, skipping quoted literals
_PLACEHOLDER = re.compile(r"'(?:[^'\\]|\\.|'')*'|:([A-Za-z_][A-Za-z0-9_]*)")


def to_pyformat(sql: str) -> str:
    """Rewrite :name placeholders as PyMySQL's %(name)s, escaping literal %."""
    out = []
    pos = 0
    for match in _PLACEHOLDER.finditer(sql):
        out.append(sql[pos:match.start()].replace("%", "%%"))
        if match.group(1):
            out.append(f"%({match.group(1)})s")
        else:
            out.append(match.group(0).replace("%", "%%"))
        pos = match.end()
    out.append(sql[pos:].replace("%", "%%"))
    return "".join(out)


class MySQLGateway:
    """
    Database gateway over PyMySQL.

    Statements outside an explicit transaction are committed immediately,
    reads included, so a long-lived connection sees fresh data.
    """

    dialect = "mysql"

    def __init__(
        self,
        connection: Optional[pymysql.connections.Connection] = None,
        table_prefix: str = "",
        **connect_kwargs: Any,
    ):
        """
        Initialize MySQL gateway.

        Args:
            connection: Existing PyMySQL connection; opened lazily from
                `connect_kwargs` when omitted
            table_prefix: Prefix prepended to every logical table name
            **connect_kwargs: Arguments for pymysql.connect
        """
        self._connection = connection
        self.table_prefix = table_prefix
        self.connect_kwargs = connect_kwargs
        self._in_transaction = False

    @classmethod
    def from_env(cls) -> "MySQLGateway":
        """Create a gateway from TABLE_QUERY_* environment variables."""
        settings = load_settings()
        return cls(
            table_prefix=settings.table_prefix,
            host=settings.mysql_host,
            port=settings.mysql_port,
            user=settings.mysql_user,
            password=settings.mysql_password,
            database=settings.mysql_database,
            charset=settings.mysql_charset,
        )

    @property
    def connection(self) -> pymysql.connections.Connection:
        if self._connection is None:
            self._connection = pymysql.connect(
                cursorclass=pymysql.cursors.DictCursor,
                autocommit=False,
                **self.connect_kwargs,
            )
            logger.debug("mysql_connected", host=self.connect_kwargs.get("host"))
        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def table(self, name: str) -> str:
        return f"{self.table_prefix}{name}"

    def quote(self, value: Any) -> str:
        return self.connection.escape(value)

    def _run(self, sql: str, params: Optional[Dict[str, Any]] = None):
        logger.debug("sql_executed", sql=sql)
        cursor = self.connection.cursor()
        if params is None:
            cursor.execute(sql)
        else:
            cursor.execute(to_pyformat(sql), params)
        return cursor

    def _write(self, sql: str, params: Optional[Dict[str, Any]] = None) -> int:
        with self._run(sql, params) as cursor:
            affected = cursor.rowcount
        if not self._in_transaction:
            self.connection.commit()
        return affected

    def _end_read(self) -> None:
        # ends the REPEATABLE READ snapshot opened by the read
        if not self._in_transaction:
            self.connection.commit()

    def select(self, sql: str) -> List[Dict[str, Any]]:
        with self._run(sql) as cursor:
            rows = list(cursor.fetchall())
        self._end_read()
        return rows

    def get_row(self, sql: str) -> Dict[str, Any]:
        with self._run(sql) as cursor:
            row = cursor.fetchone()
        self._end_read()
        return row or {}

    def get_one(self, sql: str) -> Any:
        with self._run(sql) as cursor:
            row = cursor.fetchone()
        self._end_read()
        return next(iter(row.values())) if row else None

    def execute(self, sql: str) -> int:
        return self._write(sql)

    def update(self, sql: str, data: Dict[str, Any]) -> int:
        return self._write(sql, data)

    def delete(self, sql: str) -> int:
        return self._write(sql)

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
        verb = "REPLACE" if replace else "INSERT IGNORE" if ignore else "INSERT"

        rows = data if multi else [data]
        ids = []
        for row in rows:
            columns = ",".join(f"`{c}`" for c in row)
            placeholders = ",".join(f":{c}" for c in row)
            with self._run(f"{verb} INTO {table} ({columns}) VALUES ({placeholders})", row) as cursor:
                ids.append(cursor.lastrowid or 0)
        if not self._in_transaction:
            self.connection.commit()
        return ids if multi else ids[0]

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def begin_transaction(self) -> None:
        self.connection.begin()
        self._in_transaction = True

    def commit(self) -> None:
        self.connection.commit()
        self._in_transaction = False

    def rollback(self) -> None:
        self.connection.rollback()
        self._in_transaction = False
