"""
Table model - CRUD operations over a single table.

Combines the statement translator with a database gateway and applies the
table configuration (primary key, auto timestamps).
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union, final

import structlog

from table_query.core.interfaces import IDatabaseGateway
from table_query.core.models import TableConfig
from table_query.execution.transaction import transaction
from table_query.query.clauses import Projection, to_int
from table_query.query.translator import QueryTranslator

logger = structlog.get_logger()

Row = Dict[str, Any]
Filter = Mapping[str, Any]


@final
class TableModel:
    """
    Data access for one table.

    The operation set is fixed; behaviour varies only through the
    `TableConfig` (table name, primary key, timestamp columns, clock).
    Instances hold no state between calls and can be shared as long as the
    gateway can.

    Example:
        >>> users = TableModel(gateway, TableConfig(table="users", auto_created="created_at"))
        >>> users.select(["id", "name"], {"age__gte": 18}, {"id": "desc"}, 10)
    """

    def __init__(self, gateway: IDatabaseGateway, config: TableConfig):
        """
        Initialize table model.

        Args:
            gateway: Database gateway that executes the SQL
            config: Table configuration
        """
        self.gateway = gateway
        self.config = config
        self.translator = QueryTranslator(gateway)

    @property
    def table(self) -> str:
        """Physical table name, as resolved by the gateway."""
        return self.gateway.table(self.config.table)

    def get(self, id: Any) -> Row:
        """Fetch a row by primary key, or an empty dict."""
        return self.get_row({self.config.pk: id})

    def get_row(self, filter: Optional[Filter] = None, fields: Optional[Projection] = None) -> Row:
        """Fetch the first row matching a filter."""
        sql = self.translator.get_row(self.table, filter, fields)
        return self.gateway.get_row(sql)

    def count(self, filter: Optional[Filter] = None) -> int:
        """Count rows matching a filter."""
        sql = self.translator.count(self.table, filter)
        return to_int(self.gateway.get_one(sql))

    def select(
        self,
        fields: Optional[Projection] = None,
        filter: Optional[Filter] = None,
        order: Optional[Mapping[str, str]] = None,
        limit: int = 0,
        offset: int = 0,
    ) -> List[Row]:
        """
        Query rows.

        Args:
            fields: Projection, empty for all columns
            filter: Filter mapping, e.g. {"status__in": [1, 2]}
            order: Column to direction mapping, e.g. {"id": "desc"}
            limit: Maximum number of rows, 0 for no limit
            offset: Rows to skip; ignored without a limit

        Returns:
            Rows as returned by the gateway
        """
        sql = self.translator.select(self.table, fields, filter, order, limit, offset)
        return self.gateway.select(sql)

    def page(
        self,
        fields: Optional[Projection],
        filter: Optional[Filter],
        order: Optional[Mapping[str, str]],
        page: int = 1,
        size: int = 20,
    ) -> List[Row]:
        """Query one page of rows; pages are numbered from 1."""
        offset = 0
        if to_int(page) > 0 and to_int(size) > 0:
            page = max(to_int(page), 1)
            size = max(to_int(size), 1)
            offset = (page - 1) * size
        return self.select(fields, filter, order, size, offset)

    def insert(
        self,
        data: Union[Row, List[Row]],
        replace: bool = False,
        multi: bool = False,
        ignore: bool = False,
    ) -> Any:
        """
        Insert a row, or a batch of rows when `multi` is set.

        A single insert returns the generated key (0 without an
        auto-increment key). A batch runs in one transaction and returns
        the list of generated keys.

        Args:
            data: Row, or list of rows with `multi`
            replace: Replace rows colliding on a unique key
            multi: Insert a batch
            ignore: Skip rows colliding on a unique key

        Returns:
            Generated key(s), or False when `data` is empty
        """
        if not data:
            return False

        if self._has_timestamps():
            now = self.config.now()
            if multi:
                data = [self._stamp(row, now, created=True) for row in data]
            else:
                data = self._stamp(data, now, created=True)

        if multi:
            logger.debug("batch_insert", table=self.config.table, rows=len(data))
            with transaction(self.gateway):
                return self.gateway.insert(self.table, data, replace, multi, ignore)
        return self.gateway.insert(self.table, data, replace, multi, ignore)

    def insert_or_update(self, data: Union[Row, List[Row]], multi: bool = False) -> int:
        """
        Insert rows, updating those that collide on a primary or unique key.

        For a single row the result tells what happened: 1 for an insert,
        2 for an update, 0 when nothing changed (MySQL semantics). For a
        batch it only tells whether anything changed.

        Args:
            data: Row, or list of rows sharing the same columns with `multi`
            multi: Upsert a batch

        Returns:
            Affected row count reported by the gateway
        """
        if not data:
            return 0
        rows = list(data) if multi else [data]
        if self._has_timestamps():
            now = self.config.now()
            rows = [self._stamp(row, now, created=True) for row in rows]

        sql = self.translator.upsert(self.table, rows, self.config.auto_created)
        return self.gateway.execute(sql)

    def update(self, data: Row, filter: Optional[Filter]) -> Union[int, bool]:
        """
        Update rows matching a filter; values are bound as parameters.

        Returns:
            Affected row count, or False when `data` is empty
        """
        if not data:
            return False
        if self.config.auto_updated:
            data = self._stamp(data, self.config.now(), created=False)
        sql, params = self.translator.update(self.table, data, filter)
        return self.gateway.update(sql, params)

    def delete(self, filter: Optional[Filter]) -> int:
        """
        Delete rows matching a filter.

        An empty filter deletes every row in the table.
        """
        sql = self.translator.delete(self.table, filter)
        return self.gateway.delete(sql)

    def increment(self, data: Mapping[str, Any], filter: Optional[Filter]) -> Union[int, bool]:
        """
        Add integer deltas to columns.

            model.increment({"views": 1, "stock": -2}, {"id": 1})

        Returns:
            Affected row count, or False when `data` is empty
        """
        if not data:
            return False
        now = self.config.now() if self.config.auto_updated else None
        sql = self.translator.increment(
            self.table, data, filter, self.config.auto_updated, now
        )
        return self.gateway.execute(sql)

    def begin_transaction(self) -> None:
        self.gateway.begin_transaction()

    def commit_transaction(self) -> None:
        self.gateway.commit()

    def rollback_transaction(self) -> None:
        self.gateway.rollback()

    @contextmanager
    def transaction(self) -> Iterator["TableModel"]:
        """Run several operations atomically."""
        with transaction(self.gateway):
            yield self

    @staticmethod
    def index(rows: Iterable[Mapping[str, Any]], key: str) -> Dict[Any, Mapping[str, Any]]:
        """Re-key a list of rows by one of their columns; later rows win."""
        return {row[key]: row for row in rows}

    def __str__(self) -> str:
        return self.config.table

    def __repr__(self) -> str:
        return f"TableModel(table={self.config.table!r}, pk={self.config.pk!r})"

    def _has_timestamps(self) -> bool:
        return bool(self.config.auto_created or self.config.auto_updated)

    def _stamp(self, row: Mapping[str, Any], now: Any, created: bool) -> Row:
        """Copy a row, filling missing timestamp columns with `now`."""
        row = dict(row)
        columns = [self.config.auto_updated]
        if created:
            columns.insert(0, self.config.auto_created)
        for column in columns:
            if column and row.get(column) is None:
                row[column] = now
        return row
