"""Transaction scoping for gateway calls."""

from table_query.execution.transaction import transaction

__all__ = ["transaction"]
