"""
MySQL database adapter implementation.
"""

from __future__ import annotations

from typing import Any

from ..dialects.mysql import MySQLDialect
from .base import AdapterConfigurationError, ConnectionConfig, DriverAdapter, ReportsCurrentSchema


def _load_driver():
    try:
        import pymysql  # type: ignore[import-untyped]

        return pymysql
    except ImportError:
        try:
            import MySQLdb

            return MySQLdb
        except ImportError:
            return None


class MySQLAdapter(ReportsCurrentSchema, DriverAdapter):
    """
    Adapter wrapping a MySQL DB-API driver (PyMySQL or mysqlclient).

    ``current_schema()`` reports the default database, which is what MySQL
    calls a schema.
    """

    def __init__(self, slow_query_ms: int = 100) -> None:
        super().__init__(MySQLDialect(), slow_query_ms=slow_query_ms)

    def _open(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError(
                "PyMySQL or mysqlclient is required to use MySQLAdapter "
                "(pip install 'flavordb[mysql]')."
            )
        dsn = config.dsn
        if dsn is None:
            raise AdapterConfigurationError(
                "ConnectionConfig must be built from a DSN for MySQL connections."
            )

        connect_kwargs: dict[str, Any] = {
            "host": dsn.host or "localhost",
            "user": dsn.username,
            "password": dsn.password,
            "database": dsn.database,
        }
        if dsn.port:
            connect_kwargs["port"] = dsn.port
        connect_kwargs.update(config.options or {})
        if config.ssl:
            for key, value in config.ssl.mysql_options().items():
                connect_kwargs.setdefault(key, value)
        if config.timeout and "connect_timeout" not in connect_kwargs:
            connect_kwargs["connect_timeout"] = int(config.timeout)

        connection = driver.connect(**connect_kwargs)
        if hasattr(connection, "autocommit"):
            connection.autocommit(config.autocommit)
        return connection

    def _begin(self) -> None:
        if self.config is not None and self.config.autocommit:
            return
        self.execute("START TRANSACTION")
