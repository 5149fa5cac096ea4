import datetime
import logging

import pytest

from flavordb import ClockSkewError, Flavor
from flavordb.clock import coerce_db_time

APP_TIME = datetime.datetime(2024, 3, 1, 12, 0, 0)


def _db_with_skew(scripted_db, skew_ms, flavor=Flavor.oracle):
    db_time = APP_TIME - datetime.timedelta(milliseconds=skew_ms)
    db, connection = scripted_db(flavor, {"select": [(db_time,)]}, clock=lambda: APP_TIME)
    return db, connection


def test_large_skew_raises(scripted_db):
    db, _ = _db_with_skew(scripted_db, 6000)
    with pytest.raises(ClockSkewError) as excinfo:
        db.assert_time_synchronized(1000, 5000)
    assert excinfo.value.skew_ms == pytest.approx(6000)
    message = str(excinfo.value)
    assert "NTP" in message
    assert "time zone" in message


def test_negative_skew_uses_magnitude(scripted_db):
    db, _ = _db_with_skew(scripted_db, -6000)
    with pytest.raises(ClockSkewError) as excinfo:
        db.assert_time_synchronized(1000, 5000)
    assert excinfo.value.skew_ms == pytest.approx(-6000)


def test_moderate_skew_warns(scripted_db, caplog):
    db, _ = _db_with_skew(scripted_db, 2000)
    skew = db.assert_time_synchronized(1000, 5000)
    assert skew == pytest.approx(2000)
    warnings = [r for r in caplog.records if r.name == "flavordb.clock" and r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Clock skew detected" in warnings[0].message


def test_small_skew_is_silent(scripted_db, caplog):
    db, _ = _db_with_skew(scripted_db, -500)
    assert db.assert_time_synchronized(1000, 5000) == pytest.approx(-500)
    assert not [r for r in caplog.records if r.name == "flavordb.clock" and r.levelno >= logging.WARNING]


def test_default_thresholds(scripted_db, caplog):
    db, _ = _db_with_skew(scripted_db, 20_000)
    db.assert_time_synchronized()
    assert any("Clock skew detected" in r.message for r in caplog.records)

    db, _ = _db_with_skew(scripted_db, 40_000)
    with pytest.raises(ClockSkewError):
        db.assert_time_synchronized()


def test_query_uses_flavor_time_expression(scripted_db):
    db, connection = _db_with_skew(scripted_db, 0)
    db.assert_time_synchronized()
    assert connection.executed[-1][0] == "select systimestamp(3) from dual"


def test_app_time_is_midpoint_of_clock_reads(scripted_db):
    reads = iter([APP_TIME, APP_TIME + datetime.timedelta(seconds=4)])
    db, _ = scripted_db(Flavor.generic, {"select": [(APP_TIME,)]}, clock=lambda: next(reads))
    assert db.assert_time_synchronized(5000, 10_000) == pytest.approx(2000)


@pytest.mark.parametrize("warn_ms, error_ms", [(-1, 10), (10, -1), (20, 10)])
def test_invalid_thresholds(scripted_db, warn_ms, error_ms):
    db, connection = _db_with_skew(scripted_db, 0)
    with pytest.raises(ValueError):
        db.assert_time_synchronized(warn_ms, error_ms)
    assert connection.executed == []


def test_coerce_db_time_accepts_driver_shapes():
    assert coerce_db_time("2024-03-01 12:00:00.250") == datetime.datetime(2024, 3, 1, 12, 0, 0, 250000)
    assert coerce_db_time(b"2024-03-01T12:00:00") == datetime.datetime(2024, 3, 1, 12, 0)
    assert coerce_db_time(datetime.date(2024, 3, 1)) == datetime.datetime(2024, 3, 1)
    aware = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)
    assert coerce_db_time(aware) == aware.astimezone().replace(tzinfo=None)


def test_sqlite_clock_is_in_sync(tmp_path):
    from flavordb import ConnectionConfig, Database, SQLiteAdapter

    with Database(SQLiteAdapter(), connection_config=ConnectionConfig(url="sqlite:///:memory:")) as db:
        assert abs(db.assert_time_synchronized()) < 10_000


def test_aware_app_clock_is_compared_in_local_time(scripted_db):
    aware_now = APP_TIME.astimezone(datetime.timezone.utc)
    db_time = APP_TIME - datetime.timedelta(milliseconds=2000)
    db, _ = scripted_db(Flavor.oracle, {"select": [(db_time,)]}, clock=lambda: aware_now)
    assert db.assert_time_synchronized(5000, 10_000) == pytest.approx(2000)
