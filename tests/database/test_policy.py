import pytest

from flavordb import ConnectionConfig, Database, Options, PolicyError, SQLiteAdapter
from flavordb.errors import ConfigurationError
from flavordb.security import require_option


@pytest.fixture
def make_db(tmp_path):
    opened = []

    def build(options=None):
        db = Database(
            SQLiteAdapter(),
            options,
            connection_config=ConnectionConfig(url=f"sqlite:///{tmp_path / 'policy.db'}"),
        )
        opened.append(db)
        return db

    yield build
    for db in opened:
        db.close()


def test_commit_now_refused_by_default(make_db):
    db = make_db()
    with pytest.raises(PolicyError) as excinfo:
        db.commit_now()
    assert excinfo.value.option == "allow_manual_transaction_control"
    assert "allow_manual_transaction_control" in str(excinfo.value)
    assert "FLAVORDB_ALLOW_MANUAL_TRANSACTION_CONTROL" in str(excinfo.value)


def test_rollback_now_refused_by_default(make_db):
    with pytest.raises(PolicyError):
        make_db().rollback_now()


def test_underlying_connection_refused_by_default(make_db):
    with pytest.raises(PolicyError) as excinfo:
        make_db().underlying_connection()
    assert excinfo.value.option == "allow_connection_access"


def test_policy_refusal_is_logged(make_db, caplog):
    with pytest.raises(PolicyError):
        make_db().commit_now()
    assert any("Blocked commit_now()" in record.message for record in caplog.records)


def test_manual_commit_when_enabled(make_db):
    db = make_db(Options(allow_manual_transaction_control=True))
    db.ddl("create table t (v integer)").execute()
    db.adapter.begin()
    db.execute("insert into t (v) values (?)", [1])
    db.commit_now()
    db.rollback_now()
    assert db.select("select count(*) from t").query_scalar() == 1


def test_connection_access_when_enabled(make_db):
    db = make_db(Options(allow_connection_access=True))
    connection = db.underlying_connection()
    assert connection is db.adapter.connection


def test_require_option_unknown_flag():
    with pytest.raises(ConfigurationError):
        require_option(Options(), "allow_everything", "anything()")
