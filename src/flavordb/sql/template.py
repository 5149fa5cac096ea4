"""
SQL template compilation.

Template text may contain positional (``?``) and named (``:name``) markers.
Doubling a marker character (``??`` or ``::``) produces the literal
character instead. Markers inside quoted strings or comments are *not*
exempted, so callers must never build template text from untrusted input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, List, Tuple

from ..errors import TemplateError

if TYPE_CHECKING:
    from ..dialects.base import Dialect


class MarkerKind(str, Enum):
    POSITIONAL = "positional"
    NAMED = "named"


@dataclass(frozen=True)
class Marker:
    kind: MarkerKind
    offset: int
    name: str | None = None

    @property
    def label(self) -> str:
        if self.kind is MarkerKind.NAMED:
            return f":{self.name}"
        return f"?@{self.offset}"


@dataclass(frozen=True)
class SqlTemplate:
    """
    Immutable compiled form of SQL template text.

    ``text_parts`` holds the literal text around the markers with escapes
    already collapsed, so ``len(text_parts) == len(markers) + 1``.
    """

    source: str
    text_parts: Tuple[str, ...]
    markers: Tuple[Marker, ...]

    @property
    def positional_count(self) -> int:
        return sum(1 for marker in self.markers if marker.kind is MarkerKind.POSITIONAL)

    @property
    def named_markers(self) -> Tuple[Marker, ...]:
        return tuple(marker for marker in self.markers if marker.kind is MarkerKind.NAMED)

    @property
    def names(self) -> Tuple[str, ...]:
        """Distinct marker names in order of first appearance."""
        seen: dict[str, None] = {}
        for marker in self.named_markers:
            seen.setdefault(marker.name or "", None)
        return tuple(seen)

    @property
    def literal_text(self) -> str:
        return "".join(self.text_parts)

    def render(self, dialect: "Dialect") -> str:
        """
        Produce driver SQL using the dialect's placeholder for every marker.
        """

        percent_escaping = dialect.param_style in ("format", "pyformat")
        pieces: List[str] = []
        for index, part in enumerate(self.text_parts):
            pieces.append(part.replace("%", "%%") if percent_escaping else part)
            if index < len(self.markers):
                pieces.append(dialect.parameter_placeholder(index + 1))
        return "".join(pieces)

    def __str__(self) -> str:
        return self.source


def _is_identifier_start(char: str) -> bool:
    return char.isalpha() or char == "_"


def _is_identifier_part(char: str) -> bool:
    return char.isalnum() or char == "_"


def tokenize(sql: str) -> SqlTemplate:
    if not isinstance(sql, str):
        raise TemplateError(f"SQL text must be a string, not {type(sql).__name__}.")
    if not sql.strip():
        raise TemplateError("SQL text must not be empty.")

    parts: List[str] = []
    markers: List[Marker] = []
    buffer: List[str] = []
    length = len(sql)
    idx = 0
    while idx < length:
        char = sql[idx]
        nxt = sql[idx + 1] if idx + 1 < length else ""
        if char == "?":
            if nxt == "?":
                buffer.append("?")
                idx += 2
                continue
            parts.append("".join(buffer))
            buffer = []
            markers.append(Marker(MarkerKind.POSITIONAL, idx))
            idx += 1
            continue
        if char == ":":
            if nxt == ":":
                buffer.append(":")
                idx += 2
                continue
            if nxt and _is_identifier_start(nxt):
                end = idx + 2
                while end < length and _is_identifier_part(sql[end]):
                    end += 1
                parts.append("".join(buffer))
                buffer = []
                markers.append(Marker(MarkerKind.NAMED, idx, sql[idx + 1 : end]))
                idx = end
                continue
            # Bare colon (e.g. a cast or time literal) stays literal.
            buffer.append(char)
            idx += 1
            continue
        buffer.append(char)
        idx += 1
    parts.append("".join(buffer))
    return SqlTemplate(source=sql, text_parts=tuple(parts), markers=tuple(markers))


@lru_cache(maxsize=512)
def _compile_cached(sql: str) -> SqlTemplate:
    return tokenize(sql)


def compile_template(sql: str) -> SqlTemplate:
    """
    Compile SQL text into a reusable :class:`SqlTemplate`.
    """

    if not isinstance(sql, str):
        raise TemplateError(f"SQL text must be a string, not {type(sql).__name__}.")
    return _compile_cached(sql)
