"""Masking of credentials in DSN queries and logged SQL parameters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

REDACTED_VALUE = "***"

# Compared against names lower-cased with separators removed, so "API-Key",
# "api_key" and "apikey" all match.
_SENSITIVE_NAMES = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "accesskey",
    "privatekey",
    "sslkey",
)

# A string value containing one of these is treated as a credential itself.
_SENSITIVE_FRAGMENTS = (
    "password",
    "passwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "private_key",
    "bearer",
    "authorization",
)


def _squash(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


def is_sensitive_key(key: str) -> bool:
    squashed = _squash(key)
    return any(name in squashed for name in _SENSITIVE_NAMES)


def is_sensitive_value(value: str) -> bool:
    lowered = value.lower()
    return any(fragment in lowered for fragment in _SENSITIVE_FRAGMENTS)


def redact_query_params(query: Mapping[str, str]) -> dict[str, str]:
    return {key: REDACTED_VALUE if is_sensitive_key(key) else value for key, value in query.items()}


def redact_value(value: Any, *, key: str | None = None) -> Any:
    """
    Mask ``value`` when its name or its content looks like a credential.

    Containers are walked; mapping keys act as names for their values.
    """

    if key is not None and is_sensitive_key(str(key)):
        return REDACTED_VALUE
    if isinstance(value, Mapping):
        return {k: redact_value(v, key=str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(redact_value(item) for item in value)
    text = value.decode("utf-8", errors="ignore") if isinstance(value, (bytes, bytearray)) else value
    if isinstance(text, str) and text and is_sensitive_value(text):
        return REDACTED_VALUE
    return value


def redact_params(params: Iterable[Any], names: Iterable[str | None] | None = None) -> list[Any]:
    """
    Redact a parameter list; ``names`` pairs each value with its marker name.
    """

    values = list(params)
    keys = list(names) if names is not None else [None] * len(values)
    return [redact_value(value, key=key) for value, key in zip(values, keys)]
