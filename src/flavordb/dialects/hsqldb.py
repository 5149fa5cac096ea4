"""
HyperSQL dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class HSQLDialect(BaseDialect):
    """
    HSQLDB dialect; supports trailing ``if exists`` on drops.
    """

    flavor = Flavor.hsqldb
    param_style = "qmark"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=True,
        supports_drop_if_exists=True,
    )
    normalized_upper_case = True
    current_schema_sql = "values current_schema"
    missing_object_codes = frozenset({"-5501"})
    missing_object_pattern = missing_pattern(r"object not found")

    def from_any(self) -> str:
        return " from (values(0))"

    def db_time_sql(self) -> str:
        return "localtimestamp"

    def drop_sequence_sql(self, sequence_name: str) -> str:
        return f"drop sequence {sequence_name} if exists"

    def drop_table_sql(self, table_name: str) -> str:
        return f"drop table {table_name} if exists"


def get_hsql_dialect() -> Dialect:
    return HSQLDialect()
