"""
Gateway settings loaded from the environment.

Values are read from TABLE_QUERY_* variables, with a `.env` file in the
working directory loaded first.
"""

import os

from dotenv import load_dotenv

from table_query.core.models import GatewaySettings


def load_settings() -> GatewaySettings:
    """Build gateway settings from the environment."""
    load_dotenv()
    return GatewaySettings(
        sqlite_path=os.getenv("TABLE_QUERY_SQLITE_PATH", ":memory:"),
        table_prefix=os.getenv("TABLE_QUERY_TABLE_PREFIX", ""),
        mysql_host=os.getenv("TABLE_QUERY_MYSQL_HOST", "localhost"),
        mysql_port=os.getenv("TABLE_QUERY_MYSQL_PORT", "3306"),
        mysql_user=os.getenv("TABLE_QUERY_MYSQL_USER"),
        mysql_password=os.getenv("TABLE_QUERY_MYSQL_PASSWORD"),
        mysql_database=os.getenv("TABLE_QUERY_MYSQL_DATABASE"),
        mysql_charset=os.getenv("TABLE_QUERY_MYSQL_CHARSET", "utf8mb4"),
    )
