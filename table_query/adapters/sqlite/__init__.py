"""SQLite gateway for the table query layer."""

from table_query.adapters.sqlite.gateway import SQLiteGateway

__all__ = ["SQLiteGateway"]
