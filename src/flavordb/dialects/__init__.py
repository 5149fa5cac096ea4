"""
Dialect strategy registry.
"""

from __future__ import annotations

from typing import Callable, Dict

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities
from .derby import DerbyDialect
from .generic import GenericDialect
from .hsqldb import HSQLDialect
from .mysql import MySQLDialect
from .oracle import OracleDialect
from .postgres import PostgresDialect
from .sqlite import SQLiteDialect
from .sqlserver import SQLServerDialect
from .when import When

_REGISTRY: Dict[Flavor, Callable[[], Dialect]] = {
    Flavor.oracle: OracleDialect,
    Flavor.postgresql: PostgresDialect,
    Flavor.sqlserver: SQLServerDialect,
    Flavor.derby: DerbyDialect,
    Flavor.hsqldb: HSQLDialect,
    Flavor.sqlite: SQLiteDialect,
    Flavor.mysql: MySQLDialect,
    Flavor.generic: GenericDialect,
}


def get_dialect(flavor: Flavor | str) -> Dialect:
    """
    Return a dialect strategy for ``flavor`` (enum member or its name).
    """

    key = flavor if isinstance(flavor, Flavor) else Flavor(str(flavor).lower())
    return _REGISTRY[key]()


__all__ = [
    "BaseDialect",
    "Dialect",
    "DerbyDialect",
    "Flavor",
    "FlavorCapabilities",
    "GenericDialect",
    "HSQLDialect",
    "MySQLDialect",
    "OracleDialect",
    "PostgresDialect",
    "SQLServerDialect",
    "SQLiteDialect",
    "When",
    "get_dialect",
]
