"""
Apache Derby dialect implementation.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class DerbyDialect(BaseDialect):
    """
    Derby dialect; upper-case catalog and ``restrict`` sequence drops.
    """

    flavor = Flavor.derby
    param_style = "qmark"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=True,
        supports_drop_if_exists=False,
    )
    normalized_upper_case = True
    current_schema_sql = "values current schema"
    # 42Y55 cannot be performed because it does not exist, 42X05 table/view does not exist
    missing_object_codes = frozenset({"42Y55", "42X05"})
    missing_object_pattern = missing_pattern(r"\b42Y55\b", r"\b42X05\b")

    def from_any(self) -> str:
        return " from sysibm.sysdummy1"

    def drop_sequence_sql(self, sequence_name: str) -> str:
        return f"drop sequence {sequence_name} restrict"

    def table_exists_sql(self, *, with_schema: bool = True) -> str:
        return (
            "select count(*) from sys.systables t join sys.sysschemas s "
            "on t.schemaid = s.schemaid where s.schemaname = ? and t.tablename = ?"
        )


def get_derby_dialect() -> Dialect:
    return DerbyDialect()
