"""Error types raised by the codec and the connection controller."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    ConfigError,
    ContractViolationError,
    InternalError,
    ParsingError,
)
from .irc import (  # noqa: F401
    AlreadyConnectedError,
    HandshakeTimeoutError,
    IRCConnectionError,
    IRCError,
    NotConnectedError,
)

__all__ = [
    "InternalError",
    "ParsingError",
    "ContractViolationError",
    "ConfigError",
    "IRCError",
    "IRCConnectionError",
    "AlreadyConnectedError",
    "HandshakeTimeoutError",
    "NotConnectedError",
    "classify_error",
    "log_error",
]
