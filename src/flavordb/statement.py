"""
Fluent statement builders returned by ``Database.select`` and friends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from .errors import BindingError, StatementError
from .sql import SqlTemplate, compile_template, typed

if TYPE_CHECKING:
    from .database import Database


class SqlStatement:
    """
    Collects arguments for one SQL template; nothing runs until executed.

    Arguments are either all positional (:meth:`arg`) or all named
    (:meth:`named`). Mixing the two is rejected at execution time.
    """

    def __init__(self, database: "Database", sql: str, kind: str = "sql") -> None:
        self.database = database
        self.template: SqlTemplate = compile_template(sql)
        self.kind = kind
        self._positional: List[Any] = []
        self._named: Dict[str, Any] = {}

    def arg(self, value: Any, sql_type: Optional[str] = None) -> "SqlStatement":
        self._positional.append(typed(value, sql_type) if sql_type else value)
        return self

    def args(self, *values: Any) -> "SqlStatement":
        self._positional.extend(values)
        return self

    def named(self, name: str, value: Any, sql_type: Optional[str] = None) -> "SqlStatement":
        if name.startswith(":"):
            name = name[1:]
        if name in self._named:
            raise BindingError(f"Named value :{name} was supplied more than once.")
        self._named[name] = typed(value, sql_type) if sql_type else value
        return self

    def named_args(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> "SqlStatement":
        for name, value in {**(values or {}), **kwargs}.items():
            self.named(name, value)
        return self

    def bindings(self) -> List[Any] | Dict[str, Any]:
        if self._positional and self._named:
            raise BindingError(
                "Statement mixes positional and named values; bind every marker "
                "positionally or every marker by name."
            )
        if self._named:
            return dict(self._named)
        return list(self._positional)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def execute(self) -> Any:
        return self.database.run(self.template, self.bindings())

    def update(self, expected_rows: Optional[int] = None) -> int:
        """
        Execute and return the affected row count, optionally enforcing it.
        """

        cursor = self.execute()
        count = getattr(cursor, "rowcount", -1)
        if expected_rows is not None and count != expected_rows:
            raise StatementError(
                f"The {self.kind} statement affected {count} row(s) but {expected_rows} "
                "were expected."
            )
        return count

    def query_row(self) -> Any:
        return self.execute().fetchone()

    def query_scalar(self) -> Any:
        row = self.query_row()
        if row is None:
            return None
        return row[0]

    def __repr__(self) -> str:
        return f"<SqlStatement {self.kind} {self.template.source!r}>"
