"""
Oracle dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class OracleDialect(BaseDialect):
    """
    Oracle dialect using numeric (``:1``) binds and an upper-case catalog.
    """

    flavor = Flavor.oracle
    param_style = "numeric"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=True,
        supports_drop_if_exists=False,
    )
    normalized_upper_case = True
    current_schema_sql = "select sys_context('USERENV', 'CURRENT_SCHEMA') from dual"
    # ORA-00942 table or view does not exist, ORA-02289 sequence does not exist
    missing_object_codes = frozenset({"942", "2289"})
    missing_object_pattern = missing_pattern(r"ORA-00942\b", r"ORA-02289\b")

    def parameter_placeholder(self, position: int | None = None) -> str:
        return f":{position or 1}"

    def from_any(self) -> str:
        return " from dual"

    def db_time_sql(self) -> str:
        return "systimestamp(3)"

    def sequence_next_value(self, sequence_name: str) -> str:
        return f"{sequence_name}.nextval"

    def table_exists_sql(self, *, with_schema: bool = True) -> str:
        return (
            "select count(*) from all_objects where owner = ? and object_name = ? "
            "and object_type in ('TABLE', 'VIEW')"
        )

    def release_savepoint_sql(self, name: str) -> str | None:
        return None


def get_oracle_dialect() -> Dialect:
    return OracleDialect()
