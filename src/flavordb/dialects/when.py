"""
Flavor-conditional SQL fragments.

    sql = "select 1" + db.when(Flavor.oracle, " from dual").when(
        Flavor.derby, " from sysibm.sysdummy1"
    ).otherwise("")
"""

from __future__ import annotations

from typing import Tuple

from .base import Flavor


def _as_flavor(flavor: Flavor | str) -> Flavor:
    if isinstance(flavor, Flavor):
        return flavor
    return Flavor(str(flavor).lower())


class When:
    """
    Immutable chain of ``(flavor, fragment)`` alternatives.

    Each :meth:`when` returns a new chain, so a partially built chain can be
    shared between threads. The first entry matching the active flavor wins,
    later duplicates are ignored.
    """

    __slots__ = ("_active", "_choices")

    def __init__(self, active: Flavor | str, choices: Tuple[Tuple[Flavor, str], ...] = ()) -> None:
        self._active = _as_flavor(active)
        self._choices = choices

    @property
    def active(self) -> Flavor:
        return self._active

    @property
    def choices(self) -> Tuple[Tuple[Flavor, str], ...]:
        return self._choices

    def when(self, flavor: Flavor | str, sql: str) -> "When":
        return When(self._active, self._choices + ((_as_flavor(flavor), sql),))

    def otherwise(self, sql: str | None = None) -> str:
        for flavor, fragment in self._choices:
            if flavor is self._active:
                return fragment
        return sql if sql is not None else ""

    def __str__(self) -> str:
        return self.otherwise()

    def __repr__(self) -> str:
        pairs = ", ".join(f"{flavor.value}={fragment!r}" for flavor, fragment in self._choices)
        return f"When(active={self._active.value}, {pairs})"
