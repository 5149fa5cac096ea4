"""
SQLite dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class SQLiteDialect(BaseDialect):
    """
    SQLite dialect using qmark param style and minimal capabilities.
    """

    flavor = Flavor.sqlite
    param_style = "qmark"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=False,
        supports_sequences=False,
        supports_drop_if_exists=True,
    )
    normalized_upper_case = False
    missing_object_pattern = missing_pattern(r"no such table")

    def db_time_sql(self) -> str:
        return "strftime('%Y-%m-%d %H:%M:%f', 'now', 'localtime')"

    def drop_table_sql(self, table_name: str) -> str:
        return f"drop table if exists {table_name}"

    def table_exists_sql(self, *, with_schema: bool = True) -> str:
        if with_schema:
            return (
                "select count(*) from pragma_table_list "
                "where schema = ? and name = ? collate nocase and type in ('table', 'view')"
            )
        return (
            "select count(*) from sqlite_master "
            "where type in ('table', 'view') and name = ? collate nocase"
        )


def get_sqlite_dialect() -> Dialect:
    return SQLiteDialect()
