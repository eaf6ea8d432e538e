"""Tests for settings and logging configuration."""

import structlog

from table_query.logging_config import configure_logging
from table_query.settings import load_settings


def test_load_settings_defaults(monkeypatch):
    for name in ("TABLE_QUERY_SQLITE_PATH", "TABLE_QUERY_TABLE_PREFIX", "TABLE_QUERY_MYSQL_PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.sqlite_path == ":memory:"
    assert settings.table_prefix == ""
    assert settings.mysql_port == 3306


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("TABLE_QUERY_TABLE_PREFIX", "shard1_")
    monkeypatch.setenv("TABLE_QUERY_MYSQL_USER", "reader")
    settings = load_settings()
    assert settings.table_prefix == "shard1_"
    assert settings.mysql_user == "reader"


def test_configure_logging():
    configure_logging("DEBUG", "json")
    assert structlog.is_configured()
    structlog.get_logger().debug("configured")
    structlog.reset_defaults()
