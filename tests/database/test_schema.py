import pytest

from flavordb import CapabilityError, ConnectionConfig, Database, Flavor, SQLiteAdapter, get_dialect
from flavordb.adapters import SchemaReportingDBAPIAdapter
from flavordb.schema import normalize_table_name


@pytest.mark.parametrize(
    "flavor, expected",
    [
        (Flavor.oracle, "ORDERS"),
        (Flavor.derby, "ORDERS"),
        (Flavor.hsqldb, "ORDERS"),
        (Flavor.postgresql, "orders"),
        (Flavor.sqlserver, "orders"),
        (Flavor.sqlite, "orders"),
        (Flavor.mysql, "orders"),
    ],
)
def test_normalize_folds_to_catalog_case(flavor, expected):
    dialect = get_dialect(flavor)
    assert normalize_table_name("Orders", dialect) == expected
    assert normalize_table_name(expected, dialect) == expected


@pytest.mark.parametrize("flavor", list(Flavor))
def test_normalize_keeps_quoted_names(flavor):
    dialect = get_dialect(flavor)
    assert normalize_table_name('"MyTable"', dialect) == "MyTable"
    assert normalize_table_name(None, dialect) is None


@pytest.fixture
def sqlite_db(tmp_path):
    db = Database(SQLiteAdapter(), connection_config=ConnectionConfig(url=f"sqlite:///{tmp_path / 's.db'}"))
    db.ddl("create table MyStuff (id integer)").execute()
    yield db
    db.close()


def test_sqlite_table_exists(sqlite_db):
    assert sqlite_db.table_exists("mystuff")
    assert sqlite_db.table_exists("MYSTUFF")
    assert not sqlite_db.table_exists("missing")
    assert sqlite_db.table_exists(None) is False


def test_sqlite_table_exists_in_main_schema(sqlite_db):
    assert sqlite_db.table_exists("mystuff", "main")


def test_table_exists_without_schema_support_fails_loudly(scripted_db):
    db, connection = scripted_db(Flavor.oracle)
    with pytest.raises(CapabilityError) as excinfo:
        db.table_exists("orders")
    message = str(excinfo.value)
    assert "Unable to determine the schema" in message
    assert "table_exists(table_name, schema_name)" in message
    assert "upgrade" in message
    assert connection.executed == []


def test_table_exists_with_explicit_schema(scripted_db):
    db, connection = scripted_db(Flavor.oracle, {"all_objects": [(1,)]})
    assert db.table_exists("orders", "app")
    sql, params = connection.executed[-1]
    assert "all_objects" in sql
    assert params == ("APP", "ORDERS")


def test_table_exists_uses_reported_schema(scripted_db):
    db, connection = scripted_db(
        Flavor.oracle,
        {"sys_context": [("SALES",)], "all_objects": [(0,)]},
        adapter_cls=SchemaReportingDBAPIAdapter,
    )
    assert db.table_exists('"MixedCase"') is False
    assert connection.executed[-1][1] == ("SALES", "MixedCase")


def test_table_exists_when_driver_reports_no_schema(scripted_db):
    db, _ = scripted_db(
        Flavor.postgresql,
        {"current_schema": [(None,)]},
        adapter_cls=SchemaReportingDBAPIAdapter,
    )
    with pytest.raises(CapabilityError):
        db.table_exists("orders")
