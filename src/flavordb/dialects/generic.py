"""
Fallback dialect for databases without a dedicated flavor.
"""

from __future__ import annotations

from .base import BaseDialect, Dialect, Flavor, FlavorCapabilities, missing_pattern


class GenericDialect(BaseDialect):
    """
    ANSI-leaning dialect with conservative capabilities.
    """

    flavor = Flavor.generic
    param_style = "qmark"
    capabilities = FlavorCapabilities(
        supports_savepoints=True,
        supports_schema_namespaces=True,
        supports_sequences=False,
        supports_drop_if_exists=False,
    )
    normalized_upper_case = False
    missing_object_codes = frozenset({"42S02", "42P01"})
    missing_object_pattern = missing_pattern(
        r"\b(?:table|relation|view|sequence|object)\b[^\n]*\bdoes not exist",
        r"no such table",
        r"unknown table",
        r"object not found",
    )


def get_generic_dialect() -> Dialect:
    return GenericDialect()
