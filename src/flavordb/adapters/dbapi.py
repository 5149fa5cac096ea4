"""
Adapter for any PEP 249 connection supplied by the caller.

Flavors without a bundled adapter (Oracle, SQL Server, Derby, HyperSQL, ...)
are reached by handing an open connection, or a factory producing one, to
:class:`DBAPIAdapter` together with the flavor it speaks.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..dialects import Flavor, get_dialect
from ..dialects.base import Dialect
from .base import AdapterConfigurationError, ConnectionConfig, DriverAdapter, ReportsCurrentSchema

ConnectionFactory = Callable[[ConnectionConfig], Any]


class DBAPIAdapter(DriverAdapter):
    """
    Wraps an externally acquired DB-API connection.

    This adapter does not report the session schema; drivers known to
    answer the flavor's current-schema query should use
    :class:`SchemaReportingDBAPIAdapter`.
    """

    def __init__(
        self,
        flavor: Flavor | str | Dialect,
        connection: Any = None,
        *,
        factory: Optional[ConnectionFactory] = None,
        slow_query_ms: int = 100,
    ) -> None:
        dialect = get_dialect(flavor) if isinstance(flavor, (Flavor, str)) else flavor
        super().__init__(dialect, slow_query_ms=slow_query_ms)
        self._connection = connection
        self._factory = factory

    def _open(self, config: ConnectionConfig) -> Any:
        if self._factory is None:
            raise AdapterConfigurationError(
                "DBAPIAdapter needs an open connection or a factory to connect "
                f"to {config.descriptive_label()}."
            )
        return self._factory(config)


class SchemaReportingDBAPIAdapter(ReportsCurrentSchema, DBAPIAdapter):
    """
    DB-API adapter that answers the dialect's current-schema query.
    """
