"""
Statement translation.

Turns projections, filters and row data into complete SQL statements for a
single physical table.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from table_query.core.interfaces import IDatabaseGateway
from table_query.query.clauses import (
    Projection,
    build_assignments,
    build_fields,
    build_increments,
    build_limit,
    build_order,
)
from table_query.query.filter_builder import FilterBuilder


class QueryTranslator:
    """
    Builds SQL statements for the CRUD operations of a table.

    All literal values are quoted by the gateway; UPDATE statements use
    named placeholders instead and return the data to bind.
    """

    def __init__(self, gateway: IDatabaseGateway):
        """
        Initialize query translator.

        Args:
            gateway: Database gateway used for quoting and dialect lookup
        """
        self.gateway = gateway
        self.filter_builder = FilterBuilder(gateway)

    def where(self, filters: Optional[Mapping[str, Any]]) -> str:
        """Return " WHERE ..." for a non-empty filter, otherwise ""."""
        condition = self.filter_builder.build(filters)
        return f" WHERE {condition}" if condition else ""

    def select(
        self,
        table: str,
        fields: Optional[Projection] = None,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Mapping[str, str]] = None,
        limit: Any = 0,
        offset: Any = 0,
    ) -> str:
        sql = f"SELECT {build_fields(fields)} FROM {table}"
        sql += self.where(filters)
        order_sql = build_order(order)
        if order_sql:
            sql += f" ORDER BY {order_sql}"
        limit_sql = build_limit(limit, offset)
        if limit_sql:
            sql += f" {limit_sql}"
        return sql

    def get_row(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        fields: Optional[Projection] = None,
    ) -> str:
        return f"SELECT {build_fields(fields)} FROM {table}{self.where(filters)} LIMIT 1"

    def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> str:
        return f"SELECT COUNT(*) FROM {table}{self.where(filters)}"

    def update(
        self,
        table: str,
        data: Mapping[str, Any],
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Build a parameterized UPDATE.

        Returns:
            (sql, params) where params binds every `:column` placeholder
        """
        sql = f"UPDATE {table} SET {build_assignments(data)}{self.where(filters)}"
        return sql, dict(data)

    def delete(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> str:
        return f"DELETE FROM {table}{self.where(filters)}"

    def increment(
        self,
        table: str,
        data: Mapping[str, Any],
        filters: Optional[Mapping[str, Any]] = None,
        auto_updated: str = "",
        now: Any = None,
    ) -> str:
        now_literal = self.gateway.quote(now) if auto_updated else None
        assignments = build_increments(data, auto_updated, now_literal)
        return f"UPDATE {table} SET {assignments}{self.where(filters)}"

    def upsert(
        self,
        table: str,
        rows: List[Mapping[str, Any]],
        auto_created: str = "",
    ) -> str:
        """
        Build a multi-row insert that updates rows colliding on a unique key.

        The column list comes from the first row; every row must share it.
        All columns except `auto_created` are overwritten on collision.

        Args:
            table: Physical table name
            rows: Rows to insert, values are quoted inline
            auto_created: Column left untouched on update

        Returns:
            INSERT ... ON DUPLICATE KEY UPDATE for MySQL, or
            INSERT ... ON CONFLICT DO UPDATE for SQLite
        """
        columns = list(rows[0].keys())
        column_sql = ",".join(f"`{c}`" for c in columns)
        values = ",".join(
            "(" + ",".join(self.gateway.quote(row.get(c)) for c in columns) + ")"
            for row in rows
        )
        updated = [c for c in columns if not (auto_created and c == auto_created)]

        sql = f"INSERT INTO {table} ({column_sql}) VALUES {values}"
        sqlite = getattr(self.gateway, "dialect", "mysql") == "sqlite"
        if not updated:
            # only auto_created given: a collision leaves the row as it is
            if sqlite:
                return f"{sql} ON CONFLICT DO NOTHING"
            return f"{sql} ON DUPLICATE KEY UPDATE `{auto_created}`=`{auto_created}`"
        if sqlite:
            updates = ",".join(f"`{c}`=excluded.`{c}`" for c in updated)
            return f"{sql} ON CONFLICT DO UPDATE SET {updates}"
        updates = ",".join(f"`{c}`=VALUES(`{c}`)" for c in updated)
        return f"{sql} ON DUPLICATE KEY UPDATE {updates}"
