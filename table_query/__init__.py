"""
Table Query - filter-driven SQL data access for a single table.

Main entry point for creating table models over a database gateway.
"""

from table_query.core.models import TableConfig, epoch_clock, datetime_clock
from table_query.model import TableModel

__all__ = ["TableModel", "TableConfig", "epoch_clock", "datetime_clock"]
