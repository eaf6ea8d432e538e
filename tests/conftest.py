"""Pytest configuration and fixtures."""

from typing import Any, Dict, List

import pytest
from pymysql.converters import escape_item

from table_query import TableConfig, TableModel
from table_query.adapters.sqlite import SQLiteGateway

FIXED_NOW = 1700000000


class RecordingGateway:
    """Gateway that records SQL instead of executing it, quoting like MySQL."""

    dialect = "mysql"

    def __init__(self):
        self.calls: List[tuple] = []
        self.rows: List[Dict[str, Any]] = []
        self.one: Any = 0
        self.affected = 1
        self.insert_error: Exception = None
        self.in_transaction = False

    @property
    def sql(self) -> str:
        """SQL of the last statement."""
        return self.calls[-1][1]

    def quote(self, value: Any) -> str:
        return escape_item(value, "utf8mb4")

    def table(self, name: str) -> str:
        return name

    def select(self, sql: str):
        self.calls.append(("select", sql))
        return self.rows

    def get_row(self, sql: str):
        self.calls.append(("get_row", sql))
        return self.rows[0] if self.rows else {}

    def get_one(self, sql: str):
        self.calls.append(("get_one", sql))
        return self.one

    def execute(self, sql: str):
        self.calls.append(("execute", sql))
        return self.affected

    def insert(self, table, data, replace=False, multi=False, ignore=False):
        self.calls.append(("insert", table, data, replace, multi, ignore))
        if self.insert_error is not None:
            raise self.insert_error
        return list(range(1, len(data) + 1)) if multi else 1

    def update(self, sql: str, data):
        self.calls.append(("update", sql, data))
        return self.affected

    def delete(self, sql: str):
        self.calls.append(("delete", sql))
        return self.affected

    def begin_transaction(self):
        self.calls.append(("begin",))
        self.in_transaction = True

    def commit(self):
        self.calls.append(("commit",))
        self.in_transaction = False

    def rollback(self):
        self.calls.append(("rollback",))
        self.in_transaction = False


@pytest.fixture
def recorder():
    """Recording gateway with MySQL quoting."""
    return RecordingGateway()


@pytest.fixture
def model(recorder):
    """Table model over the recording gateway, with timestamp columns."""
    config = TableConfig(
        table="t",
        auto_created="created_at",
        auto_updated="updated_at",
        clock=lambda: FIXED_NOW,
    )
    return TableModel(recorder, config)


@pytest.fixture
def plain_model(recorder):
    """Table model over the recording gateway, without timestamp columns."""
    return TableModel(recorder, TableConfig(table="t"))


@pytest.fixture
def sqlite_gateway():
    """In-memory SQLite gateway with a users table."""
    gateway = SQLiteGateway(":memory:", table_prefix="app_")
    gateway.connection.execute(
        """
        CREATE TABLE app_users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            age INTEGER,
            note TEXT,
            views INTEGER NOT NULL DEFAULT 0,
            created_at INTEGER,
            updated_at INTEGER
        )
        """
    )
    yield gateway
    gateway.close()


@pytest.fixture
def users(sqlite_gateway):
    """Users table model over SQLite."""
    config = TableConfig(
        table="users",
        auto_created="created_at",
        auto_updated="updated_at",
        clock=lambda: FIXED_NOW,
    )
    return TableModel(sqlite_gateway, config)


@pytest.fixture
def populated(users):
    """Users table with five rows."""
    users.insert(
        [
            {"name": "alice", "age": 31, "note": "50% off"},
            {"name": "bob", "age": 17, "note": "plain"},
            {"name": "carol", "age": 25, "note": None},
            {"name": "dave", "age": 40, "note": "under_score"},
            {"name": "erin", "age": 22, "note": "5000 off"},
        ],
        multi=True,
    )
    return users
