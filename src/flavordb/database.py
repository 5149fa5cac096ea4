"""
The ``Database`` session facade.

One ``Database`` wraps one adapter (and so one connection) for one logical
unit of work. It is not meant to be shared between threads.
"""

from __future__ import annotations

import datetime
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from . import clock as _clock
from . import schema as _schema
from .adapters.base import ConnectionConfig, DatabaseAdapter
from .capabilities import Capability, CapabilityProbe
from .config import Options
from .dialects import Flavor, When
from .dialects.base import Dialect
from .errors import DatabaseError, StatementError
from .security.policy import ALLOW_CONNECTION_ACCESS, ALLOW_MANUAL_TRANSACTION_CONTROL, require_option
from .security.redaction import redact_params
from .sql import BoundParameter, SqlTemplate, bind, compile_template, parameter_values
from .sql.binder import describe
from .statement import SqlStatement
from .transaction import Transaction, TransactionManager
from .utils import get_logger, time_call

_NO_SEQUENCES_REMEDY = (
    "Use an identity/auto-increment column, or a flavor with sequence support "
    "(Oracle, PostgreSQL, SQL Server, Derby, HSQLDB)."
)


class Database:
    """
    Executes templated SQL against one adapter under one ``Options`` policy.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        options: Optional[Options] = None,
        *,
        connection_config: Optional[ConnectionConfig] = None,
        clock: Optional[Callable[[], datetime.datetime]] = None,
    ) -> None:
        self.adapter = adapter
        self.options = options or Options()
        self.dialect: Dialect = adapter.dialect
        self.capabilities = CapabilityProbe(adapter)
        self.transaction_manager = TransactionManager(adapter, self.dialect)
        self.clock: Callable[[], datetime.datetime] = clock or datetime.datetime.now
        self.logger = get_logger("database")
        if connection_config is not None:
            self.adapter.connect(connection_config)

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.adapter.close()

    # ------------------------------------------------------------------ #
    # Flavor
    # ------------------------------------------------------------------ #
    @property
    def flavor(self) -> Flavor:
        return self.dialect.flavor

    def when(self, flavor: Flavor | str, sql: str) -> When:
        """
        Start a flavor-conditional fragment chain::

            "select 1" + db.when(Flavor.oracle, " from dual").otherwise("")
        """

        return When(self.flavor).when(flavor, sql)

    def supports(self, capability: Capability | str) -> bool:
        return self.capabilities.supports(capability)

    # ------------------------------------------------------------------ #
    # Statements
    # ------------------------------------------------------------------ #
    def select(self, sql: str) -> SqlStatement:
        return SqlStatement(self, sql, "select")

    def insert(self, sql: str) -> SqlStatement:
        return SqlStatement(self, sql, "insert")

    def update(self, sql: str) -> SqlStatement:
        return SqlStatement(self, sql, "update")

    def delete(self, sql: str) -> SqlStatement:
        return SqlStatement(self, sql, "delete")

    def ddl(self, sql: str) -> SqlStatement:
        return SqlStatement(self, sql, "ddl")

    def execute(self, sql: str, params: Sequence[Any] | Mapping[str, Any] | None = None) -> Any:
        return self.run(compile_template(sql), params)

    def run(
        self,
        template: SqlTemplate,
        params: Sequence[Any] | Mapping[str, Any] | None = None,
    ) -> Any:
        bound = bind(template, params)
        rendered = template.render(self.dialect)
        values = parameter_values(bound)
        logged_params = self._loggable_params(bound)
        try:
            with time_call(
                "database.execute",
                self.logger,
                sql=template.source,
                params=logged_params,
                threshold_ms=self.options.slow_query_ms,
            ):
                return self.adapter.execute(rendered, values)
        except DatabaseError:
            raise
        except Exception as exc:
            raise StatementError(self._failure_message(template, bound, exc)) from exc

    def _loggable_params(self, bound: Sequence[BoundParameter]) -> list[Any] | None:
        if not self.options.sql_parameter_logging:
            return None
        return redact_params(
            parameter_values(bound), [parameter.marker.name for parameter in bound]
        )

    def _failure_message(
        self, template: SqlTemplate, bound: Sequence[BoundParameter], exc: Exception
    ) -> str:
        message = f"Error executing SQL on {self.dialect.name}: {type(exc).__name__}: {exc}"
        if not self.options.sql_in_exception_messages:
            return message + " (enable Options.sql_in_exception_messages to include the SQL)"
        message += f" | SQL: {template.source}"
        if self.options.sql_parameter_logging and bound:
            redacted = redact_params(
                [p.value for p in bound], [p.marker.name for p in bound]
            )
            shown = [
                BoundParameter(p.marker, value, p.sql_type) for p, value in zip(bound, redacted)
            ]
            message += " | Parameters: " + ", ".join(describe(shown))
        return message

    # ------------------------------------------------------------------ #
    # Sequences and quiet drops
    # ------------------------------------------------------------------ #
    def next_sequence_value(self, sequence_name: str) -> int:
        self.capabilities.require(Capability.SEQUENCES, _NO_SEQUENCES_REMEDY)
        sql = f"select {self.dialect.sequence_next_value(sequence_name)}{self.dialect.from_any()}"
        value = self.select(sql).query_scalar()
        if value is None:
            raise StatementError(f"Sequence {sequence_name} returned no value.")
        return int(value)

    def drop_table_quietly(self, table_name: str) -> None:
        """
        Drop a table, ignoring only the error raised when it does not exist.
        """

        self._drop_quietly(self.dialect.drop_table_sql(table_name), "table", table_name)

    def drop_sequence_quietly(self, sequence_name: str) -> None:
        self.capabilities.require(Capability.SEQUENCES, _NO_SEQUENCES_REMEDY)
        self._drop_quietly(self.dialect.drop_sequence_sql(sequence_name), "sequence", sequence_name)

    def _drop_quietly(self, sql: str, kind: str, name: str) -> None:
        try:
            self.ddl(sql).execute()
        except StatementError as exc:
            cause = exc.__cause__
            if cause is None or not self.dialect.is_missing_object_error(cause):
                raise
            if self.dialect.missing_object_needs_confirmation(cause) and self._object_visible(name):
                raise
            self.logger.debug("Ignoring drop of missing %s %s: %s", kind, name, cause)

    def _object_visible(self, name: str) -> bool:
        """
        Ask the catalog whether ``name`` still exists after a failed drop.

        An unanswerable question counts as visible so the drop error surfaces.
        """

        sql = self.dialect.object_exists_sql()
        if sql is None:
            return True
        try:
            return bool(self.select(sql).arg(name).query_scalar())
        except DatabaseError:
            self.logger.warning("Could not confirm whether %s exists after a failed drop", name)
            return True

    # ------------------------------------------------------------------ #
    # Schema helpers
    # ------------------------------------------------------------------ #
    def normalize_table_name(self, table_name: Optional[str]) -> Optional[str]:
        return _schema.normalize_table_name(table_name, self.dialect)

    def table_exists(self, table_name: Optional[str], schema_name: Optional[str] = None) -> bool:
        return _schema.table_exists(self, table_name, schema_name)

    # ------------------------------------------------------------------ #
    # Clock
    # ------------------------------------------------------------------ #
    def assert_time_synchronized(
        self,
        warn_ms: float = _clock.DEFAULT_WARN_MS,
        error_ms: float = _clock.DEFAULT_ERROR_MS,
    ) -> float:
        return _clock.assert_time_synchronized(self, warn_ms, error_ms)

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """
        Run the block as one unit of work; nested blocks use savepoints.

        The yielded :class:`~flavordb.transaction.Transaction` can be marked
        rollback-only to discard the block's work without raising.
        """

        with self.transaction_manager.transaction() as level:
            yield level

    def commit_now(self) -> None:
        require_option(self.options, ALLOW_MANUAL_TRANSACTION_CONTROL, "commit_now()")
        self.adapter.commit()

    def rollback_now(self) -> None:
        require_option(self.options, ALLOW_MANUAL_TRANSACTION_CONTROL, "rollback_now()")
        self.adapter.rollback()

    def underlying_connection(self) -> Any:
        require_option(self.options, ALLOW_CONNECTION_ACCESS, "underlying_connection()")
        return self.adapter.connection
