"""
Dialect strategy interfaces describing per-flavor SQL conventions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, FrozenSet, Pattern, Protocol, Tuple


class Flavor(str, Enum):
    """
    Identity of a SQL dialect / database product.
    """

    oracle = "oracle"
    postgresql = "postgresql"
    sqlserver = "sqlserver"
    derby = "derby"
    hsqldb = "hsqldb"
    sqlite = "sqlite"
    mysql = "mysql"
    generic = "generic"

    @classmethod
    def from_url(cls, url: str) -> "Flavor":
        """
        Guess the flavor from a DSN or JDBC-style URL, ``generic`` when unknown.
        """

        lowered = url.strip().lower()
        if lowered.startswith("jdbc:"):
            lowered = lowered[len("jdbc:") :]
        for prefixes, flavor in _URL_PREFIXES:
            if lowered.startswith(prefixes):
                return flavor
        return cls.generic

    def __str__(self) -> str:
        return self.value


_URL_PREFIXES: Tuple[Tuple[Tuple[str, ...], Flavor], ...] = (
    (("oracle",), Flavor.oracle),
    (("postgresql", "postgres"), Flavor.postgresql),
    (("sqlserver", "mssql"), Flavor.sqlserver),
    (("derby",), Flavor.derby),
    (("hsqldb",), Flavor.hsqldb),
    (("sqlite",), Flavor.sqlite),
    (("mysql", "mariadb"), Flavor.mysql),
)


@dataclass(frozen=True)
class FlavorCapabilities:
    """
    Feature flags a flavor supports at the protocol level.

    Driver-level features that vary between driver versions of one flavor
    are probed separately, see :mod:`flavordb.capabilities`.
    """

    supports_savepoints: bool = True
    supports_schema_namespaces: bool = True
    supports_sequences: bool = False
    supports_drop_if_exists: bool = False


class Dialect(Protocol):
    """
    Strategy interface consumed by the session, schema and adapter layers.
    """

    @property
    def flavor(self) -> Flavor: ...

    @property
    def name(self) -> str: ...

    @property
    def param_style(self) -> str: ...

    @property
    def capabilities(self) -> FlavorCapabilities: ...

    @property
    def normalized_upper_case(self) -> bool: ...

    @property
    def current_schema_sql(self) -> str | None: ...

    def quote_identifier(self, identifier: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def parameter_placeholder(self, position: int | None = None) -> str: ...

    def from_any(self) -> str: ...

    def db_time_sql(self) -> str: ...

    def sequence_next_value(self, sequence_name: str) -> str: ...

    def drop_sequence_sql(self, sequence_name: str) -> str: ...

    def drop_table_sql(self, table_name: str) -> str: ...

    def table_exists_sql(self, *, with_schema: bool = True) -> str: ...

    def savepoint_sql(self, name: str) -> str: ...

    def rollback_to_savepoint_sql(self, name: str) -> str: ...

    def release_savepoint_sql(self, name: str) -> str | None: ...

    def is_missing_object_error(self, exc: BaseException) -> bool: ...

    def missing_object_needs_confirmation(self, exc: BaseException) -> bool: ...

    def object_exists_sql(self) -> str | None: ...


def error_code(exc: BaseException) -> str | None:
    """
    Extract a SQLSTATE or vendor error code from a DB-API exception.
    """

    for attribute in ("sqlstate", "pgcode", "sql_state"):
        value = getattr(exc, attribute, None)
        if value:
            return str(value)
    if exc.args:
        first = exc.args[0]
        code = getattr(first, "code", None)
        if code is not None:
            return str(code)
        if isinstance(first, int):
            return str(first)
    return None


class BaseDialect:
    """
    Shared behaviour for the concrete dialects.

    Subclasses describe their flavor through class attributes and override
    methods only where the SQL syntax differs.
    """

    flavor: ClassVar[Flavor] = Flavor.generic
    param_style: ClassVar[str] = "qmark"
    capabilities: ClassVar[FlavorCapabilities] = FlavorCapabilities()
    normalized_upper_case: ClassVar[bool] = False
    current_schema_sql: ClassVar[str | None] = None
    missing_object_codes: ClassVar[FrozenSet[str]] = frozenset()
    missing_object_pattern: ClassVar[Pattern[str] | None] = None
    ambiguous_missing_codes: ClassVar[FrozenSet[str]] = frozenset()
    ambiguous_missing_pattern: ClassVar[Pattern[str] | None] = None

    @property
    def name(self) -> str:
        return self.flavor.value

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def format_table(self, table_name: str) -> str:
        if "." in table_name and self.capabilities.supports_schema_namespaces:
            schema, table = table_name.split(".", 1)
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table_name)

    def parameter_placeholder(self, position: int | None = None) -> str:
        return "?"

    def from_any(self) -> str:
        return ""

    def db_time_sql(self) -> str:
        return "current_timestamp"

    def sequence_next_value(self, sequence_name: str) -> str:
        return f"next value for {sequence_name}"

    def drop_sequence_sql(self, sequence_name: str) -> str:
        return f"drop sequence {sequence_name}"

    def drop_table_sql(self, table_name: str) -> str:
        return f"drop table {table_name}"

    def table_exists_sql(self, *, with_schema: bool = True) -> str:
        """
        Catalog query counting ``(schema, table)`` matches.

        Namespaced flavors always resolve a schema first, so only flavors
        without schema namespaces honour ``with_schema=False``.
        """

        return (
            "select count(*) from information_schema.tables "
            "where table_schema = ? and table_name = ?"
        )

    def savepoint_sql(self, name: str) -> str:
        return f"savepoint {name}"

    def rollback_to_savepoint_sql(self, name: str) -> str:
        return f"rollback to savepoint {name}"

    def release_savepoint_sql(self, name: str) -> str | None:
        return f"release savepoint {name}"

    def is_missing_object_error(self, exc: BaseException) -> bool:
        # A driver-supplied code is authoritative; messages are only read
        # when the driver gives no code at all.
        code = error_code(exc)
        if code is not None:
            return code in self.missing_object_codes
        if self.missing_object_pattern is not None:
            return bool(self.missing_object_pattern.search(str(exc)))
        return False

    def missing_object_needs_confirmation(self, exc: BaseException) -> bool:
        """
        True when the vendor reports "missing" and "not permitted" alike.
        """

        code = error_code(exc)
        if code is not None:
            return code in self.ambiguous_missing_codes
        if self.ambiguous_missing_pattern is not None:
            return bool(self.ambiguous_missing_pattern.search(str(exc)))
        return False

    def object_exists_sql(self) -> str | None:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} flavor={self.flavor.value}>"


def missing_pattern(*fragments: str) -> Pattern[str]:
    return re.compile("|".join(fragments), re.IGNORECASE)
