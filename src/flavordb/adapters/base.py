"""
Adapter protocol definitions for flavordb.

Adapters are the execution boundary: they own one DB-API connection and run
already-rendered SQL. Connection acquisition itself (pools, providers) is the
caller's business.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..config import parse_bool
from ..dialects.base import Dialect, Flavor
from ..errors import ConfigurationError, DatabaseError
from ..security.dsns import DSNConfig, parse_dsn
from ..utils import get_logger, time_call


class AdapterError(DatabaseError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError, ConfigurationError):
    """Raised when configuration or required dependencies are invalid."""


class AdapterConnectionError(AdapterError):
    """Raised when establishing or using a connection fails."""


# DSN query key -> SSLConfig field. Earlier keys win when both spellings appear.
_SSL_QUERY_KEYS: Tuple[Tuple[str, str], ...] = (
    ("sslmode", "mode"),
    ("sslrootcert", "rootcert"),
    ("sslcert", "cert"),
    ("ssl_cert", "cert"),
    ("sslkey", "key"),
    ("ssl_key", "key"),
    ("ssl_ca", "ca"),
)

_POSTGRES_SSL_OPTIONS = {"mode": "sslmode", "rootcert": "sslrootcert", "cert": "sslcert", "key": "sslkey"}
_MYSQL_SSL_OPTIONS = ("ca", "cert", "key", "check_hostname")


@dataclass
class SSLConfig:
    mode: str | None = None
    rootcert: str | None = None
    cert: str | None = None
    key: str | None = None
    ca: str | None = None
    check_hostname: bool | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))

    def postgres_options(self) -> dict[str, Any]:
        return {
            option: getattr(self, name)
            for name, option in _POSTGRES_SSL_OPTIONS.items()
            if getattr(self, name)
        }

    def mysql_options(self) -> dict[str, Any]:
        ssl = {name: getattr(self, name) for name in _MYSQL_SSL_OPTIONS if getattr(self, name) is not None}
        return {"ssl": ssl} if ssl else {}


def _adapter_bool(value: str, *, key: str) -> bool:
    try:
        return parse_bool(value, key=key)
    except ConfigurationError as exc:
        raise AdapterConfigurationError(str(exc)) from exc


def _adapter_number(value: str, *, key: str, kind: type) -> Any:
    try:
        return kind(value)
    except ValueError as exc:
        raise AdapterConfigurationError(
            f"Invalid {kind.__name__} value for '{key}': {value!r}"
        ) from exc


def _take_ssl(query: Dict[str, str]) -> Optional[SSLConfig]:
    ssl = SSLConfig()
    for key, name in _SSL_QUERY_KEYS:
        value = query.pop(key, None)
        if value is not None and getattr(ssl, name) is None:
            setattr(ssl, name, value)
    if "ssl_check_hostname" in query:
        ssl.check_hostname = _adapter_bool(query.pop("ssl_check_hostname"), key="ssl_check_hostname")
    return None if ssl.is_empty() else ssl


def _split_query(query: Dict[str, str]) -> Dict[str, Any]:
    """
    Pull the settings ``ConnectionConfig`` models out of a DSN query.

    Whatever remains in ``query`` afterwards is passed to the driver.
    """

    settings: Dict[str, Any] = {"ssl": _take_ssl(query)}
    if "autocommit" in query:
        settings["autocommit"] = _adapter_bool(query.pop("autocommit"), key="autocommit")
    if "timeout" in query:
        settings["timeout"] = _adapter_number(query.pop("timeout"), key="timeout", kind=float)
    if "isolation_level" in query:
        settings["isolation_level"] = query.pop("isolation_level")
    if "connect_timeout" in query:
        query["connect_timeout"] = _adapter_number(
            query["connect_timeout"], key="connect_timeout", kind=int
        )
    return settings


@dataclass
class ConnectionConfig:
    """
    Normalized connection configuration for adapters.
    """

    url: str
    autocommit: bool = False
    isolation_level: str | None = None
    timeout: float | None = None
    options: dict[str, Any] | None = None
    ssl: SSLConfig | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a connection config by parsing the DSN string.

        Keyword arguments override what the DSN query says; ``options`` are
        merged into the driver options instead of replacing them.
        """

        parsed = parse_dsn(dsn)
        query: Dict[str, Any] = dict(parsed.query)
        settings = _split_query(query)
        query.update(kwargs.pop("options", None) or {})
        settings.update(kwargs)
        settings["autocommit"] = bool(settings.get("autocommit"))
        return cls(url=dsn, dsn=parsed, options=query or None, **settings)

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **kwargs)

    @property
    def flavor(self) -> Flavor:
        return Flavor.from_url(self.url)

    def redacted_dsn(self) -> str:
        if self.dsn:
            return self.dsn.redacted()
        return self.url

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted


class DatabaseAdapter(Protocol):
    """
    Adapter interface exposing the operations used by ``Database``.
    """

    dialect: Dialect

    @property
    def connection(self) -> Any:
        """
        The live DB-API connection; raises when not connected.
        """

    def connect(self, config: ConnectionConfig) -> Any: ...

    def close(self) -> None:
        """
        Close underlying resources. Implementations should be idempotent.
        """

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any:
        """
        Execute a single rendered SQL statement returning a cursor.
        """

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@runtime_checkable
class SupportsCurrentSchema(Protocol):
    """
    Optional adapter capability: report the session's default schema.
    """

    def current_schema(self) -> str | None: ...


class DriverAdapter(DatabaseAdapter):
    """
    Shared plumbing for adapters owning a single DB-API connection.

    Subclasses implement :meth:`_open`; failures there are wrapped in
    :class:`AdapterConnectionError` with a redacted DSN.
    """

    def __init__(self, dialect: Dialect, *, slow_query_ms: int = 100) -> None:
        self.dialect = dialect
        self.slow_query_ms = slow_query_ms
        self.config: ConnectionConfig | None = None
        self._connection: Any = None
        self._transaction_open = False
        self.logger = get_logger(f"adapters.{dialect.name}")

    def _open(self, config: ConnectionConfig) -> Any:
        raise NotImplementedError

    def connect(self, config: ConnectionConfig) -> Any:
        self.logger.info(
            "Connecting to %s %s (autocommit=%s)",
            self.dialect.name,
            config.descriptive_label(),
            config.autocommit,
        )
        try:
            connection = self._open(config)
        except AdapterError:
            raise
        except Exception as exc:
            raise AdapterConnectionError(
                f"Failed to connect to {self.dialect.name} at {config.descriptive_label()}."
            ) from exc
        self.config = config
        self._connection = connection
        return connection

    def close(self) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            finally:
                self._connection = None
                self._transaction_open = False

    @property
    def connection(self) -> Any:
        if self._connection is None:
            raise AdapterConnectionError(f"{type(self).__name__} is not connected.")
        if self._is_closed(self._connection):
            if self.config is None:
                raise AdapterConnectionError(f"{type(self).__name__} connection was closed.")
            if self._transaction_open:
                raise AdapterConnectionError(
                    f"{self.dialect.name} connection closed inside an open transaction; "
                    "work done since begin() is lost and will not be replayed on a new connection."
                )
            self.logger.warning("%s connection closed; reconnecting.", self.dialect.name)
            self.connect(self.config)
        return self._connection

    @staticmethod
    def _is_closed(connection: Any) -> bool:
        return getattr(connection, "closed", False) is True

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any:
        cursor = self.connection.cursor()
        try:
            with time_call(
                f"{self.dialect.name}.execute", self.logger, sql=sql, threshold_ms=self.slow_query_ms
            ):
                # format/pyformat drivers only collapse "%%" when given parameters.
                if params or self.dialect.param_style in ("format", "pyformat"):
                    cursor.execute(sql, tuple(params or ()))
                else:
                    cursor.execute(sql)
        except Exception:
            cursor.close()
            raise
        return cursor

    def begin(self) -> None:
        self._begin()
        self._transaction_open = True

    def _begin(self) -> None:
        # DB-API connections open a transaction implicitly on the first statement.
        return None

    def commit(self) -> None:
        self.connection.commit()
        self._transaction_open = False

    def rollback(self) -> None:
        connection = self._connection
        self._transaction_open = False
        if connection is not None and self._is_closed(connection):
            self.logger.warning("%s connection already closed; nothing to roll back.", self.dialect.name)
            return
        self.connection.rollback()


class ReportsCurrentSchema:
    """
    Mixin answering ``current_schema()`` with the dialect's query.
    """

    dialect: Dialect

    def current_schema(self) -> str | None:
        sql = self.dialect.current_schema_sql
        if sql is None:
            raise AdapterConfigurationError(
                f"The {self.dialect.name} flavor has no current-schema query."
            )
        row = self.execute(sql).fetchone()  # type: ignore[attr-defined]
        return row[0] if row else None
