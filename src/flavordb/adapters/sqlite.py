"""
SQLite database adapter implementation.
"""

from __future__ import annotations

import sqlite3

from ..dialects.sqlite import SQLiteDialect
from .base import ConnectionConfig, DriverAdapter

_MEMORY_URLS = ("sqlite:///:memory:", "sqlite://", ":memory:")


class SQLiteAdapter(DriverAdapter):
    """
    Adapter wrapping the Python stdlib sqlite3 module.
    """

    def __init__(self, slow_query_ms: int = 100) -> None:
        super().__init__(SQLiteDialect(), slow_query_ms=slow_query_ms)

    def _open(self, config: ConnectionConfig) -> sqlite3.Connection:
        path = self._normalize_path(config.url)
        connection = sqlite3.connect(
            path,
            isolation_level=None if config.autocommit else "",
            timeout=config.timeout if config.timeout is not None else 5.0,
            check_same_thread=False,
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        if config.isolation_level:
            connection.isolation_level = config.isolation_level
        return connection

    def current_schema(self) -> str:
        # Attached databases aside, everything lives in "main".
        return "main"

    def _begin(self) -> None:
        if self.connection.in_transaction:
            return
        self.connection.execute("BEGIN")

    @staticmethod
    def _normalize_path(url: str) -> str:
        if url in _MEMORY_URLS:
            return ":memory:"
        prefix = "sqlite:///"
        if url.startswith(prefix):
            return url[len(prefix) :]
        return url
