"""Core interfaces and models for the table query layer."""

from table_query.core.interfaces import IDatabaseGateway
from table_query.core.models import (
    TableConfig,
    GatewaySettings,
    epoch_clock,
    datetime_clock,
)

__all__ = [
    "IDatabaseGateway",
    "TableConfig",
    "GatewaySettings",
    "epoch_clock",
    "datetime_clock",
]
