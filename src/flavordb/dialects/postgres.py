"""
PostgreSQL dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class PostgresDialect(BaseDialect):
    """
    PostgreSQL dialect using percent positional parameters.
    """

    flavor = Flavor.postgresql
    param_style = "pyformat"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=True,
        supports_drop_if_exists=True,
    )
    normalized_upper_case = False
    current_schema_sql = "select current_schema()"
    # 42P01 undefined_table, also raised for missing sequences
    missing_object_codes = frozenset({"42P01"})
    missing_object_pattern = missing_pattern(r'relation "[^"]+" does not exist')

    def parameter_placeholder(self, position: int | None = None) -> str:
        return "%s"

    def db_time_sql(self) -> str:
        return "date_trunc('milliseconds', localtimestamp)"

    def sequence_next_value(self, sequence_name: str) -> str:
        escaped = sequence_name.replace("'", "''")
        return f"nextval('{escaped}')"

    def drop_sequence_sql(self, sequence_name: str) -> str:
        return f"drop sequence if exists {sequence_name}"

    def drop_table_sql(self, table_name: str) -> str:
        return f"drop table if exists {table_name}"


def get_postgres_dialect() -> Dialect:
    return PostgresDialect()
