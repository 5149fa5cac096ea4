"""
MySQL dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class MySQLDialect(BaseDialect):
    """
    MySQL dialect using percent-style placeholders.
    """

    flavor = Flavor.mysql
    param_style = "pyformat"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=False,
        supports_drop_if_exists=True,
    )
    normalized_upper_case = False
    current_schema_sql = "select database()"
    # 1051 unknown table, 1146 table doesn't exist
    missing_object_codes = frozenset({"1051", "1146", "42S02"})
    missing_object_pattern = missing_pattern(r"Unknown table", r"doesn't exist")

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace("`", "``")
        return f"`{escaped}`"

    def parameter_placeholder(self, position: int | None = None) -> str:
        return "%s"

    def db_time_sql(self) -> str:
        return "now(3)"

    def drop_table_sql(self, table_name: str) -> str:
        return f"drop table if exists {table_name}"


def get_mysql_dialect() -> Dialect:
    return MySQLDialect()
