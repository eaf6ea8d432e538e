"""
Abstract interfaces for database gateways.

This protocol defines the contract that a database gateway must implement
to be driven by the table model and its SQL translator.
"""

from typing import Any, Dict, List, Protocol, Union


class IDatabaseGateway(Protocol):
    """
    Execute SQL against a relational database.

    The gateway owns the connection, the quoting rules of its driver and the
    transaction primitives. Everything it returns is handed back to the
    caller unchanged.
    """

    dialect: str

    @property
    def in_transaction(self) -> bool:
        """Whether a transaction is open on the connection."""
        ...

    def quote(self, value: Any) -> str:
        """
        Quote a scalar value as an SQL literal.

        Args:
            value: Python scalar (str, int, float, bool, None, bytes)

        Returns:
            Literal text safe for interpolation, e.g. "'it''s'" or "NULL"
        """
        ...

    def table(self, name: str) -> str:
        """
        Resolve a logical table name to the physical one.

        Args:
            name: Logical table name from the table configuration

        Returns:
            Physical table name (prefixed or sharded by the gateway)
        """
        ...

    def select(self, sql: str) -> List[Dict[str, Any]]:
        """Run a query and return every row."""
        ...

    def get_row(self, sql: str) -> Dict[str, Any]:
        """Run a query and return the first row, or an empty dict."""
        ...

    def get_one(self, sql: str) -> Any:
        """Run a query and return the first column of the first row."""
        ...

    def execute(self, sql: str) -> int:
        """Run a statement and return the affected row count."""
        ...

    def insert(
        self,
        table: str,
        data: Union[Dict[str, Any], List[Dict[str, Any]]],
        replace: bool = False,
        multi: bool = False,
        ignore: bool = False,
    ) -> Any:
        """
        Insert one row (or several when `multi` is set).

        Args:
            table: Physical table name
            data: A row, or a list of rows when `multi` is set
            replace: Replace rows that collide on a unique key
            multi: Treat `data` as a list of rows
            ignore: Skip rows that collide on a unique key

        Returns:
            Generated key of the row, or the list of generated keys
        """
        ...

    def update(self, sql: str, data: Dict[str, Any]) -> int:
        """Run an UPDATE with named placeholders bound to `data`."""
        ...

    def delete(self, sql: str) -> int:
        """Run a DELETE and return the affected row count."""
        ...

    def begin_transaction(self) -> None:
        """Open a transaction."""
        ...

    def commit(self) -> None:
        """Commit the open transaction."""
        ...

    def rollback(self) -> None:
        """Roll back the open transaction."""
        ...
