"""Database gateways for the table query layer."""
