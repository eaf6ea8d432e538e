"""Tests for the MySQL gateway, using a mocked PyMySQL connection."""

from unittest.mock import MagicMock

import pytest

from table_query import TableConfig, TableModel
from table_query.adapters.mysql import MySQLGateway, to_pyformat


@pytest.fixture
def connection():
    conn = MagicMock()
    cursor = conn.cursor.return_value
    cursor.__enter__.return_value = cursor
    cursor.rowcount = 1
    cursor.lastrowid = 42
    conn.escape.side_effect = lambda v: "NULL" if v is None else f"'{v}'" if isinstance(v, str) else str(v)
    return conn


@pytest.fixture
def gateway(connection):
    return MySQLGateway(connection=connection, table_prefix="pre_")


class TestToPyformat:
    def test_placeholders(self):
        assert to_pyformat("UPDATE t SET `a` = :a WHERE `id` = 1") == (
            "UPDATE t SET `a` = %(a)s WHERE `id` = 1"
        )

    def test_literals_untouched(self):
        sql = "UPDATE t SET `a` = :a WHERE `t` = '12:30' AND `n` LIKE '%x%'"
        assert to_pyformat(sql) == (
            "UPDATE t SET `a` = %(a)s WHERE `t` = '12:30' AND `n` LIKE '%%x%%'"
        )

    def test_escaped_quote_in_literal(self):
        assert to_pyformat("SELECT 'it\\'s :x'") == "SELECT 'it\\'s :x'"


class TestMySQLGateway:
    def test_table_prefix(self, gateway):
        assert gateway.table("users") == "pre_users"

    def test_quote_uses_connection(self, gateway, connection):
        assert gateway.quote("a") == "'a'"
        connection.escape.assert_called_with("a")

    def test_execute_commits_outside_transaction(self, gateway, connection):
        assert gateway.execute("DELETE FROM t") == 1
        connection.cursor.return_value.execute.assert_called_with("DELETE FROM t")
        connection.commit.assert_called_once()

    def test_update_binds_parameters(self, gateway, connection):
        gateway.update("UPDATE t SET `a` = :a", {"a": 1})
        connection.cursor.return_value.execute.assert_called_with("UPDATE t SET `a` = %(a)s", {"a": 1})

    def test_get_one(self, gateway, connection):
        connection.cursor.return_value.fetchone.return_value = {"COUNT(*)": 3}
        assert gateway.get_one("SELECT COUNT(*) FROM t") == 3

    def test_get_row_empty(self, gateway, connection):
        connection.cursor.return_value.fetchone.return_value = None
        assert gateway.get_row("SELECT * FROM t LIMIT 1") == {}

    def test_reads_commit_outside_transaction(self, gateway, connection):
        connection.cursor.return_value.fetchall.return_value = [{"id": 1}]
        assert gateway.select("SELECT id FROM t") == [{"id": 1}]
        connection.commit.assert_called_once()

    def test_reads_inside_transaction_do_not_commit(self, gateway, connection):
        gateway.begin_transaction()
        assert gateway.in_transaction
        connection.cursor.return_value.fetchone.return_value = {"COUNT(*)": 0}
        gateway.get_one("SELECT COUNT(*) FROM t")
        gateway.get_row("SELECT * FROM t")
        connection.commit.assert_not_called()

    def test_nested_batch_insert_keeps_outer_transaction(self, gateway, connection):
        model = TableModel(gateway, TableConfig(table="t"))
        with pytest.raises(RuntimeError):
            with model.transaction():
                model.insert([{"a": 1}, {"a": 2}], multi=True)
                raise RuntimeError("abort")
        connection.begin.assert_called_once()
        connection.commit.assert_not_called()
        connection.rollback.assert_called_once()

    def test_insert_variants(self, gateway, connection):
        execute = connection.cursor.return_value.execute
        assert gateway.insert("t", {"a": 1}) == 42
        execute.assert_called_with("INSERT INTO t (`a`) VALUES (%(a)s)", {"a": 1})
        gateway.insert("t", {"a": 1}, replace=True)
        execute.assert_called_with("REPLACE INTO t (`a`) VALUES (%(a)s)", {"a": 1})
        gateway.insert("t", {"a": 1}, ignore=True)
        execute.assert_called_with("INSERT IGNORE INTO t (`a`) VALUES (%(a)s)", {"a": 1})

    def test_replace_and_ignore_rejected(self, gateway):
        with pytest.raises(ValueError):
            gateway.insert("t", {"a": 1}, replace=True, ignore=True)

    def test_transaction_defers_commit(self, gateway, connection):
        gateway.begin_transaction()
        gateway.insert("t", [{"a": 1}, {"a": 2}], multi=True)
        connection.commit.assert_not_called()
        gateway.commit()
        connection.commit.assert_called_once()

    def test_batch_insert_through_model(self, gateway, connection):
        model = TableModel(gateway, TableConfig(table="t"))
        assert model.insert([{"a": 1}, {"a": 2}], multi=True) == [42, 42]
        connection.begin.assert_called_once()
        connection.commit.assert_called_once()

    def test_batch_insert_rollback_through_model(self, gateway, connection):
        connection.cursor.return_value.execute.side_effect = RuntimeError("lost connection")
        model = TableModel(gateway, TableConfig(table="t"))
        with pytest.raises(RuntimeError):
            model.insert([{"a": 1}], multi=True)
        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()

    def test_upsert_sql(self, gateway, connection):
        model = TableModel(gateway, TableConfig(table="t"))
        model.insert_or_update({"id": 1, "a": "x"})
        connection.cursor.return_value.execute.assert_called_with(
            "INSERT INTO pre_t (`id`,`a`) VALUES (1,'x') "
            "ON DUPLICATE KEY UPDATE `id`=VALUES(`id`),`a`=VALUES(`a`)"
        )

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TABLE_QUERY_MYSQL_HOST", "db.internal")
        monkeypatch.setenv("TABLE_QUERY_MYSQL_PORT", "3307")
        monkeypatch.setenv("TABLE_QUERY_MYSQL_DATABASE", "app")
        gateway = MySQLGateway.from_env()
        assert gateway.connect_kwargs["host"] == "db.internal"
        assert gateway.connect_kwargs["port"] == 3307
        assert gateway.connect_kwargs["database"] == "app"
