"""
SQL template compilation and parameter binding.
"""

from .binder import BoundParameter, SqlValue, bind, infer_sql_type, parameter_values, typed
from .template import Marker, MarkerKind, SqlTemplate, compile_template

__all__ = [
    "BoundParameter",
    "Marker",
    "MarkerKind",
    "SqlTemplate",
    "SqlValue",
    "bind",
    "compile_template",
    "infer_sql_type",
    "parameter_values",
    "typed",
]
