"""
Unit-of-work boundaries for a ``Database`` session.

The outermost block owns the real transaction; nested blocks are mapped to
savepoints so an inner failure can be undone without losing outer work.
"""

from __future__ import annotations

import itertools
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .adapters.base import DatabaseAdapter
from .dialects.base import Dialect
from .errors import CapabilityError, TransactionError
from .utils import get_logger


@dataclass
class Transaction:
    """
    Handle for one transaction level.

    ``savepoint`` is ``None`` for the outermost level. Marking a level
    rollback-only makes the block undo its work even when it finishes
    normally.
    """

    depth: int
    savepoint: Optional[str] = None
    rollback_only: bool = False

    def set_rollback_only(self) -> None:
        self.rollback_only = True

    @property
    def nested(self) -> bool:
        return self.savepoint is not None


class TransactionManager:
    def __init__(self, adapter: DatabaseAdapter, dialect: Dialect) -> None:
        self.adapter = adapter
        self.dialect = dialect
        self._levels: List[Transaction] = []
        self._names = itertools.count(1)
        self.logger = get_logger("transaction")

    @property
    def depth(self) -> int:
        return len(self._levels)

    @property
    def current(self) -> Optional[Transaction]:
        return self._levels[-1] if self._levels else None

    def begin(self) -> Transaction:
        if not self._levels:
            self.adapter.begin()
            level = Transaction(depth=1)
        else:
            if not self.dialect.capabilities.supports_savepoints:
                raise CapabilityError(
                    f"Nested transactions need savepoints, which {self.dialect.name} does not support.",
                    capability="savepoints",
                )
            name = f"sp_{next(self._names)}"
            self.adapter.execute(self.dialect.savepoint_sql(name))
            level = Transaction(depth=self.depth + 1, savepoint=name)
        self._levels.append(level)
        self.logger.debug("Began transaction level %d (savepoint=%s)", level.depth, level.savepoint)
        return level

    def commit(self) -> None:
        level = self._pop("commit")
        if not level.nested:
            self.adapter.commit()
        else:
            self._release(level.savepoint)
        self.logger.debug("Committed transaction level %d", level.depth)

    def rollback(self) -> None:
        level = self._pop("roll back")
        if not level.nested:
            self.adapter.rollback()
        else:
            self.adapter.execute(self.dialect.rollback_to_savepoint_sql(level.savepoint))
            self._release(level.savepoint)
        self.logger.debug("Rolled back transaction level %d", level.depth)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        level = self.begin()
        try:
            yield level
        except BaseException:
            self.rollback()
            raise
        if level.rollback_only:
            self.rollback()
        else:
            self.commit()

    def _pop(self, action: str) -> Transaction:
        if not self._levels:
            raise TransactionError(f"No active transaction to {action}.")
        return self._levels.pop()

    def _release(self, savepoint: Optional[str]) -> None:
        release = self.dialect.release_savepoint_sql(savepoint or "")
        if release:
            self.adapter.execute(release)
