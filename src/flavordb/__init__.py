"""
flavordb public package initialization.

Templated SQL with positional and named markers, executed against one of
several database flavors through a policy-gated ``Database`` session.
"""

from .adapters import ConnectionConfig, DBAPIAdapter, SQLiteAdapter  # noqa: F401
from .capabilities import Capability, CapabilityProbe  # noqa: F401
from .config import Options  # noqa: F401
from .database import Database  # noqa: F401
from .dialects import Flavor, When, get_dialect  # noqa: F401
from .errors import (  # noqa: F401
    BindingError,
    CapabilityError,
    ClockSkewError,
    ConfigurationError,
    DatabaseError,
    PolicyError,
    StatementError,
    TemplateError,
    TransactionError,
)
from .sql import BoundParameter, SqlTemplate, bind, compile_template, typed  # noqa: F401
from .transaction import Transaction  # noqa: F401

__all__ = [
    "BindingError",
    "BoundParameter",
    "Capability",
    "CapabilityError",
    "CapabilityProbe",
    "ClockSkewError",
    "ConfigurationError",
    "ConnectionConfig",
    "DBAPIAdapter",
    "Database",
    "DatabaseError",
    "Flavor",
    "Options",
    "PolicyError",
    "SQLiteAdapter",
    "SqlTemplate",
    "StatementError",
    "TemplateError",
    "Transaction",
    "TransactionError",
    "When",
    "bind",
    "compile_template",
    "get_dialect",
    "typed",
]
