"""
Binding of caller values onto compiled template markers.
"""

from __future__ import annotations

import datetime
import decimal
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Tuple

from ..errors import BindingError
from .template import Marker, MarkerKind, SqlTemplate

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class SqlValue:
    """A value paired with an explicit SQL type hint."""

    value: Any
    sql_type: str


def typed(value: Any, sql_type: str) -> SqlValue:
    return SqlValue(value, sql_type.upper())


@dataclass(frozen=True)
class BoundParameter:
    marker: Marker
    value: Any
    sql_type: str


def infer_sql_type(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "BOOLEAN"
    if isinstance(value, int):
        return "INTEGER" if _INT32_MIN <= value <= _INT32_MAX else "BIGINT"
    if isinstance(value, float):
        return "DOUBLE"
    if isinstance(value, decimal.Decimal):
        return "DECIMAL"
    if isinstance(value, str):
        return "VARCHAR"
    if isinstance(value, datetime.datetime):
        return "TIMESTAMP"
    if isinstance(value, datetime.date):
        return "DATE"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "BLOB"
    return "OTHER"


def _bound(marker: Marker, raw: Any) -> BoundParameter:
    if isinstance(raw, SqlValue):
        return BoundParameter(marker, raw.value, raw.sql_type)
    return BoundParameter(marker, raw, infer_sql_type(raw))


def _bind_sequence(template: SqlTemplate, values: Sequence[Any]) -> Tuple[BoundParameter, ...]:
    expected = len(template.markers)
    if len(values) != expected:
        raise BindingError(
            f"Parameter count mismatch: SQL has {expected} marker(s) but {len(values)} value(s) "
            "were supplied. Values are consumed in marker order, named markers included."
        )
    return tuple(_bound(marker, value) for marker, value in zip(template.markers, values))


def _bind_mapping(template: SqlTemplate, values: Mapping[str, Any]) -> Tuple[BoundParameter, ...]:
    if template.positional_count:
        raise BindingError(
            f"Named values cannot be bound to SQL containing {template.positional_count} "
            "positional '?' marker(s); supply an ordered sequence instead."
        )
    names = set(template.names)
    missing = names.difference(values)
    if missing:
        raise BindingError(
            "No value supplied for named marker(s): "
            + ", ".join(f":{name}" for name in sorted(missing)),
            missing=missing,
        )
    unused = set(values).difference(names)
    if unused:
        raise BindingError(
            "Named value(s) do not appear in the SQL: "
            + ", ".join(f":{name}" for name in sorted(unused)),
            unused=unused,
        )
    return tuple(_bound(marker, values[marker.name]) for marker in template.markers)


def bind(
    template: SqlTemplate,
    bindings: Sequence[Any] | Mapping[str, Any] | None = None,
) -> Tuple[BoundParameter, ...]:
    """
    Pair every marker of ``template`` with exactly one value.

    ``bindings`` is either an ordered sequence, consumed in marker order, or
    a mapping from marker name to value. A mapping is rejected when the SQL
    also contains positional markers.
    """

    if bindings is None:
        return _bind_sequence(template, ())
    if isinstance(bindings, Mapping):
        return _bind_mapping(template, bindings)
    if isinstance(bindings, (str, bytes, bytearray)):
        raise BindingError("Bindings must be a sequence or mapping of values, not a single string.")
    return _bind_sequence(template, list(bindings))


def parameter_values(bound: Iterable[BoundParameter]) -> list[Any]:
    return [parameter.value for parameter in bound]


def describe(bound: Iterable[BoundParameter]) -> list[str]:
    described = []
    for parameter in bound:
        marker = parameter.marker
        label = f":{marker.name}" if marker.kind is MarkerKind.NAMED else "?"
        described.append(f"{label}={parameter.value!r} ({parameter.sql_type})")
    return described
