"""
Database adapter interfaces and implementations.
"""

from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    ConnectionConfig,
    DatabaseAdapter,
    DriverAdapter,
    ReportsCurrentSchema,
    SSLConfig,
    SupportsCurrentSchema,
)
from .dbapi import DBAPIAdapter, SchemaReportingDBAPIAdapter
from .mysql import MySQLAdapter
from .postgres import PostgresAdapter
from .sqlite import SQLiteAdapter

__all__ = [
    "ConnectionConfig",
    "DatabaseAdapter",
    "DriverAdapter",
    "ReportsCurrentSchema",
    "SSLConfig",
    "SupportsCurrentSchema",
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "DBAPIAdapter",
    "SchemaReportingDBAPIAdapter",
    "SQLiteAdapter",
    "PostgresAdapter",
    "MySQLAdapter",
]
