"""MySQL gateway for the table query layer."""

from table_query.adapters.mysql.gateway import MySQLGateway, to_pyformat

__all__ = ["MySQLGateway", "to_pyformat"]
