"""Policy gate for operations that bypass managed transaction boundaries."""

from __future__ import annotations

from ..config import Options
from ..errors import PolicyError
from ..utils import get_logger

logger = get_logger("security.policy")

ALLOW_CONNECTION_ACCESS = "allow_connection_access"
ALLOW_MANUAL_TRANSACTION_CONTROL = "allow_manual_transaction_control"


def require_option(options: Options, flag: str, operation: str) -> None:
    """
    Refuse ``operation`` unless ``flag`` is enabled on ``options``.
    """

    if options.enabled(flag):
        logger.debug("Option %s permits %s", flag, operation)
        return
    logger.warning("Blocked %s: option %s is not enabled", operation, flag)
    raise PolicyError(
        f"{operation} is disabled. Enable Options.{flag} (Options({flag}=True) or "
        f"the FLAVORDB_{flag.upper()} environment variable) to allow it.",
        option=flag,
    )
