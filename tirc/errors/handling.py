from __future__ import annotations

import logging

from ..logging_config import log_structured_error
from .internal import ConfigError, ContractViolationError, InternalError, ParsingError
from .irc import IRCError


def classify_error(error: BaseException) -> str:
    """Return the aggregation category used for ``error``."""
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, ContractViolationError):
        return "contract"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, IRCError):
        return "connection"
    if isinstance(error, InternalError):
        return "internal"
    if isinstance(error, OSError | ConnectionError | TimeoutError):
        return "network"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict | None = None,
    level: int = logging.ERROR,
) -> None:
    """Logs an error message with the associated exception details.

    Formats the message together with the string representation of the
    exception and hands it to structured logging so repeated failures of the
    same category are aggregated.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level, ERROR unless the caller downgrades it.

    Returns:
        None
    """
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
        level=level,
    )
