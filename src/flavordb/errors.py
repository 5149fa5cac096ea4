"""
Error hierarchy for flavordb.

Every message is meant to be read by an operator without further context,
so each error names the missing capability, the unset option, or the
offending values.
"""

from __future__ import annotations

from typing import Iterable


class DatabaseError(RuntimeError):
    """Base error for all flavordb failures."""


class ConfigurationError(DatabaseError):
    """Raised when options or environment settings are invalid."""


class TemplateError(DatabaseError):
    """Raised when SQL template text cannot be compiled."""


class BindingError(DatabaseError):
    """Raised when supplied values do not match the markers of a template."""

    def __init__(self, message: str, *, missing: Iterable[str] = (), unused: Iterable[str] = ()) -> None:
        self.missing = sorted(set(missing))
        self.unused = sorted(set(unused))
        super().__init__(message)


class CapabilityError(DatabaseError):
    """Raised when the active driver lacks an optional feature an operation needs."""

    def __init__(self, message: str, *, capability: str | None = None) -> None:
        self.capability = capability
        super().__init__(message)


class PolicyError(DatabaseError):
    """Raised when an operation is blocked by an unset ``Options`` flag."""

    def __init__(self, message: str, *, option: str) -> None:
        self.option = option
        super().__init__(message)


class ClockSkewError(DatabaseError):
    """Raised when application and database clocks diverge beyond the error threshold."""

    def __init__(self, message: str, *, skew_ms: float) -> None:
        self.skew_ms = skew_ms
        super().__init__(message)


class StatementError(DatabaseError):
    """Raised when the driver fails to execute a statement."""


class TransactionError(DatabaseError):
    """Raised when commit or rollback is requested with no open transaction."""


__all__ = [
    "BindingError",
    "CapabilityError",
    "ClockSkewError",
    "ConfigurationError",
    "DatabaseError",
    "PolicyError",
    "StatementError",
    "TemplateError",
    "TransactionError",
]
