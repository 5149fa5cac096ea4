"""
Comparison of application and database clocks.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from .errors import ClockSkewError, DatabaseError
from .utils import get_logger

if TYPE_CHECKING:
    from .database import Database

logger = get_logger("clock")

DEFAULT_WARN_MS = 10_000
DEFAULT_ERROR_MS = 30_000


def _local_naive(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def coerce_db_time(value: Any) -> datetime.datetime:
    """
    Turn a driver's timestamp into a naive local ``datetime``.
    """

    if isinstance(value, datetime.datetime):
        return _local_naive(value)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        try:
            return coerce_db_time(datetime.datetime.fromisoformat(text.strip()))
        except ValueError as exc:
            raise DatabaseError(f"Unable to parse database time {text!r}.") from exc
    raise DatabaseError(f"Unexpected database time value {value!r} ({type(value).__name__}).")


def assert_time_synchronized(
    db: "Database",
    warn_ms: float = DEFAULT_WARN_MS,
    error_ms: float = DEFAULT_ERROR_MS,
) -> float:
    """
    Check the database clock against this process' clock.

    Returns the signed skew in milliseconds (positive when the application
    is ahead). Only the magnitude is compared with the thresholds.
    """

    if warn_ms < 0 or error_ms < 0:
        raise ValueError("Clock skew thresholds must not be negative.")
    if warn_ms > error_ms:
        raise ValueError(
            f"Warning threshold ({warn_ms} ms) must not exceed error threshold ({error_ms} ms)."
        )

    dialect = db.dialect
    before = _local_naive(db.clock())
    raw = db.select(f"select {dialect.db_time_sql()}{dialect.from_any()}").query_scalar()
    after = _local_naive(db.clock())
    app_time = before + (after - before) / 2
    db_time = coerce_db_time(raw)

    skew_ms = (app_time - db_time).total_seconds() * 1000
    magnitude = abs(skew_ms)
    summary = (
        f"application clock {app_time.isoformat(sep=' ')} and database clock "
        f"{db_time.isoformat(sep=' ')} differ by {magnitude:.0f} ms"
    )
    if magnitude > error_ms:
        raise ClockSkewError(
            f"Clock skew too large: {summary} (error threshold {error_ms:.0f} ms). "
            "Check time synchronization (NTP) on both hosts and that the database "
            "session time zone matches the application time zone.",
            skew_ms=skew_ms,
        )
    if magnitude > warn_ms:
        logger.warning(
            "Clock skew detected: %s (warning threshold %.0f ms). Check time zone configuration.",
            summary,
            warn_ms,
            extra={"skew_ms": skew_ms},
        )
    else:
        logger.debug("Clock skew within limits: %s", summary)
    return skew_ms
