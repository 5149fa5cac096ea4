"""
Session options gating unsafe operations and diagnostics.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from .errors import ConfigurationError

DEFAULT_SLOW_QUERY_MS = 100
ENV_PREFIX = "FLAVORDB_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def parse_int(value: str, *, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


@dataclass(frozen=True)
class Options:
    """
    Immutable per-session policy consulted on every guarded call.

    Everything defaults to the safe setting: manual transaction control and
    raw connection access are refused, and neither SQL nor parameters leak
    into logs or exception messages.
    """

    allow_connection_access: bool = False
    allow_manual_transaction_control: bool = False
    sql_parameter_logging: bool = False
    sql_in_exception_messages: bool = False
    slow_query_ms: int = DEFAULT_SLOW_QUERY_MS

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "Options":
        """
        Build options from ``<PREFIX><FIELD_NAME>`` environment variables.

        Explicit keyword overrides win over the environment.
        """

        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for option in fields(cls):
            key = f"{prefix}{option.name.upper()}"
            raw = env.get(key)
            if raw is None:
                continue
            if option.type in ("bool", bool):
                values[option.name] = parse_bool(raw, key=key)
            else:
                values[option.name] = parse_int(raw, key=key)
        values.update(overrides)
        return cls(**values)

    def enabled(self, flag: str) -> bool:
        if flag not in {option.name for option in fields(self)}:
            raise ConfigurationError(f"Unknown option '{flag}'.")
        return bool(getattr(self, flag))
