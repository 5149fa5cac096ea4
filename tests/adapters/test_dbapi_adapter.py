import sqlite3

import pytest

from flavordb.adapters import (
    AdapterConfigurationError,
    AdapterConnectionError,
    ConnectionConfig,
    DBAPIAdapter,
    SchemaReportingDBAPIAdapter,
    SupportsCurrentSchema,
)
from flavordb.dialects import Flavor, OracleDialect


def test_wraps_existing_connection():
    connection = sqlite3.connect(":memory:")
    adapter = DBAPIAdapter(Flavor.sqlite, connection)
    assert adapter.execute("select ? + ?", [1, 2]).fetchone()[0] == 3
    assert adapter.connection is connection
    adapter.close()
    with pytest.raises(AdapterConnectionError):
        adapter.connection


def test_accepts_dialect_instance_or_name():
    assert DBAPIAdapter(OracleDialect()).dialect.flavor is Flavor.oracle
    assert DBAPIAdapter("derby").dialect.flavor is Flavor.derby


def test_connect_uses_factory():
    seen = []

    def factory(config):
        seen.append(config.url)
        return sqlite3.connect(":memory:")

    adapter = DBAPIAdapter(Flavor.sqlite, factory=factory)
    adapter.connect(ConnectionConfig(url="sqlite:///:memory:"))
    assert seen == ["sqlite:///:memory:"]
    adapter.close()


def test_connect_without_factory_fails():
    with pytest.raises(AdapterConfigurationError):
        DBAPIAdapter(Flavor.oracle).connect(ConnectionConfig(url="oracle://db"))


def test_only_schema_reporting_variant_reports_schema():
    plain = DBAPIAdapter(Flavor.oracle)
    reporting = SchemaReportingDBAPIAdapter(Flavor.oracle)
    assert not isinstance(plain, SupportsCurrentSchema)
    assert isinstance(reporting, SupportsCurrentSchema)


def test_schema_reporting_without_query_fails():
    adapter = SchemaReportingDBAPIAdapter(Flavor.sqlite, sqlite3.connect(":memory:"))
    with pytest.raises(AdapterConfigurationError):
        adapter.current_schema()


class RecordingCursor:
    def __init__(self, calls):
        self.calls = calls

    def execute(self, *args):
        self.calls.append(args)


class RecordingConnection:
    def __init__(self):
        self.calls = []
        self.closed = False

    def cursor(self):
        return RecordingCursor(self.calls)

    def close(self):
        self.closed = True


def test_format_styles_always_receive_parameter_tuple():
    connection = RecordingConnection()
    adapter = DBAPIAdapter(Flavor.postgresql, connection)
    adapter.execute("select '100%%'")
    adapter.execute("select %s", [1])
    assert connection.calls == [("select '100%%'", ()), ("select %s", (1,))]


def test_qmark_styles_skip_empty_parameters():
    connection = RecordingConnection()
    adapter = DBAPIAdapter(Flavor.derby, connection)
    adapter.execute("values current schema")
    assert connection.calls == [("values current schema",)]


def test_closed_connection_without_config_raises():
    connection = RecordingConnection()
    adapter = DBAPIAdapter(Flavor.hsqldb, connection)
    connection.closed = True
    with pytest.raises(AdapterConnectionError):
        adapter.execute("values 1")


def test_closed_connection_is_reopened_from_factory():
    opened = []

    def factory(config):
        opened.append(RecordingConnection())
        return opened[-1]

    adapter = DBAPIAdapter(Flavor.sqlserver, factory=factory)
    adapter.connect(ConnectionConfig(url="sqlserver://db"))
    opened[0].closed = True
    adapter.execute("select 1")
    assert len(opened) == 2
    assert opened[1].calls == [("select 1",)]


class FailingCursor:
    def __init__(self):
        self.closed = False

    def execute(self, *args):
        raise RuntimeError("syntax error")

    def close(self):
        self.closed = True


def test_cursor_closed_when_execute_fails():
    cursor = FailingCursor()
    connection = RecordingConnection()
    connection.cursor = lambda: cursor
    adapter = DBAPIAdapter(Flavor.oracle, connection)
    with pytest.raises(RuntimeError):
        adapter.execute("selec 1 from dual")
    assert cursor.closed
