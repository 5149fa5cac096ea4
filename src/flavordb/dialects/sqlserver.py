"""
Microsoft SQL Server dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class SQLServerDialect(BaseDialect):
    """
    SQL Server dialect using qmark parameters (pyodbc style).
    """

    flavor = Flavor.sqlserver
    param_style = "qmark"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=True,
        supports_drop_if_exists=False,
    )
    normalized_upper_case = False
    current_schema_sql = "select schema_name()"
    # 3701 cannot drop (does not exist), 42S02 base table not found
    missing_object_codes = frozenset({"3701", "42S02"})
    missing_object_pattern = missing_pattern(r"because it does not exist", r"Invalid object name")
    # 3701 reads "does not exist or you do not have permission"
    ambiguous_missing_codes = frozenset({"3701"})
    ambiguous_missing_pattern = missing_pattern(r"do not have permission")

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace("]", "]]")
        return f"[{escaped}]"

    def db_time_sql(self) -> str:
        return "current_timestamp"

    def object_exists_sql(self) -> str | None:
        # object_id() is null for objects the session cannot see.
        return "select count(*) from sys.objects where object_id = object_id(?)"

    def savepoint_sql(self, name: str) -> str:
        return f"save transaction {name}"

    def rollback_to_savepoint_sql(self, name: str) -> str:
        return f"rollback transaction {name}"

    def release_savepoint_sql(self, name: str) -> str | None:
        return None


def get_sqlserver_dialect() -> Dialect:
    return SQLServerDialect()
