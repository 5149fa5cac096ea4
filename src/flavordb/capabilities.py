"""
Runtime probing of optional driver capabilities.

Flavor capabilities describe what a database product supports; whether a
particular driver exposes it is a separate question, so results are cached
per concrete adapter class rather than per flavor.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Dict, Tuple, Type

from .adapters.base import DatabaseAdapter, SupportsCurrentSchema
from .errors import CapabilityError
from .utils import get_logger


class Capability(str, Enum):
    CURRENT_SCHEMA = "current_schema"
    SAVEPOINTS = "savepoints"
    SEQUENCES = "sequences"


def _reports_current_schema(adapter: Any) -> bool:
    return isinstance(adapter, SupportsCurrentSchema) and callable(
        getattr(adapter, "current_schema", None)
    )


def _supports_savepoints(adapter: Any) -> bool:
    return adapter.dialect.capabilities.supports_savepoints


def _supports_sequences(adapter: Any) -> bool:
    return adapter.dialect.capabilities.supports_sequences


_CHECKS: Dict[Capability, Callable[[Any], bool]] = {
    Capability.CURRENT_SCHEMA: _reports_current_schema,
    Capability.SAVEPOINTS: _supports_savepoints,
    Capability.SEQUENCES: _supports_sequences,
}


class CapabilityProbe:
    """
    Session-owned cache of ``(adapter class, capability) -> bool``.

    Lookups after the first are lock-free reads; population happens once per
    key under a lock.
    """

    def __init__(self, adapter: DatabaseAdapter) -> None:
        self.adapter = adapter
        self._cache: Dict[Tuple[Type[Any], str, Capability], bool] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("capabilities")

    def _key(self, capability: Capability) -> Tuple[Type[Any], str, Capability]:
        # Dialect flags differ between DBAPIAdapter instances of the same class.
        return (type(self.adapter), self.adapter.dialect.name, capability)

    def supports(self, capability: Capability | str) -> bool:
        tag = Capability(capability)
        key = self._key(tag)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        with self._lock:
            if key not in self._cache:
                result = bool(_CHECKS[tag](self.adapter))
                self.logger.debug(
                    "Probed %s for %s: %s", tag.value, type(self.adapter).__name__, result
                )
                self._cache[key] = result
            return self._cache[key]

    def require(self, capability: Capability | str, remedy: str) -> None:
        tag = Capability(capability)
        if self.supports(tag):
            return
        raise CapabilityError(
            f"The {self.adapter.dialect.name} driver ({type(self.adapter).__name__}) does not "
            f"support {tag.value}. {remedy}",
            capability=tag.value,
        )

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
