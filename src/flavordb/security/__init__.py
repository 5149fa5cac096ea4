"""Security helpers for flavordb."""

from .dsns import DSNConfig, parse_dsn
from .policy import require_option
from .redaction import redact_params

__all__ = ["DSNConfig", "parse_dsn", "redact_params", "require_option"]
