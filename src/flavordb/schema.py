"""
Table name normalization and catalog existence checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .capabilities import Capability
from .dialects.base import Dialect
from .errors import CapabilityError
from .utils import get_logger

if TYPE_CHECKING:
    from .database import Database

logger = get_logger("schema")

UNKNOWN_SCHEMA_MESSAGE = (
    "Unable to determine the schema. Please use table_exists(table_name, schema_name) "
    "or upgrade to a driver that supports current_schema()."
)


def _is_quoted(name: str) -> bool:
    return len(name) >= 2 and name.startswith('"') and name.endswith('"')


def normalize_table_name(table_name: Optional[str], dialect: Dialect) -> Optional[str]:
    """
    Canonicalize an identifier the way the flavor's catalog stores it.

    A name wrapped in double quotes is returned without the quotes and with
    its case untouched, which is how case-sensitive names are looked up.
    Everything else is folded to the flavor's catalog case.
    """

    if table_name is None:
        return None
    if _is_quoted(table_name):
        return table_name[1:-1]
    return table_name.upper() if dialect.normalized_upper_case else table_name.lower()


def table_exists(db: "Database", table_name: Optional[str], schema_name: Optional[str] = None) -> bool:
    if table_name is None:
        return False
    dialect = db.dialect
    normalized = normalize_table_name(table_name, dialect)

    if schema_name is not None:
        schema = normalize_table_name(schema_name, dialect)
    elif dialect.capabilities.supports_schema_namespaces:
        if not db.supports(Capability.CURRENT_SCHEMA):
            raise CapabilityError(UNKNOWN_SCHEMA_MESSAGE, capability=Capability.CURRENT_SCHEMA.value)
        schema = db.adapter.current_schema()  # type: ignore[attr-defined]
        if schema is None:
            raise CapabilityError(UNKNOWN_SCHEMA_MESSAGE, capability=Capability.CURRENT_SCHEMA.value)
    else:
        schema = None

    if schema is None:
        statement = db.select(dialect.table_exists_sql(with_schema=False)).arg(normalized)
    else:
        statement = db.select(dialect.table_exists_sql(with_schema=True)).args(schema, normalized)
    count = statement.query_scalar()
    exists = bool(count)
    logger.debug("Table %s in schema %s exists: %s", normalized, schema, exists)
    return exists
