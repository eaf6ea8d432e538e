"""
Shared data models for the table query layer.
"""

import time
from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def epoch_clock() -> int:
    """Current time as integer epoch seconds."""
    return int(time.time())


def datetime_clock() -> str:
    """Current time as a DATETIME string, for schemas that store datetimes."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class TableConfig(BaseModel):
    """Configuration of a table model."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    table: str
    pk: str = "id"
    auto_created: str = ""  # empty disables the created timestamp
    auto_updated: str = ""  # empty disables the updated timestamp
    clock: Callable[[], Any] = Field(default=epoch_clock, exclude=True)

    @field_validator("table")
    @classmethod
    def validate_table(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("table name must not be empty")
        return value

    def now(self) -> Any:
        """Value written to the auto timestamp columns."""
        return self.clock()


class GatewaySettings(BaseModel):
    """Connection settings for the bundled gateways."""

    sqlite_path: str = ":memory:"
    table_prefix: str = ""
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_user: Optional[str] = None
    mysql_password: Optional[str] = None
    mysql_database: Optional[str] = None
    mysql_charset: str = "utf8mb4"
