"""Centralized internal error hierarchy.

These exceptions describe failures of the message codec and of configuration
loading. Connection level failures live in ``errors.irc``.

Classes:
  InternalError          – Base for all internal errors.
  ParsingError           – A received line could not be parsed.
  ContractViolationError – A message was constructed against its schema
                           (unknown command, too many JOIN keys, ...).
  ConfigError            – Configuration file or values are invalid.

ContractViolationError signals a programmer error at the call site; it is
never raised for data received from the network.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ParsingError(InternalError):
    """Exception raised when a protocol line is empty or malformed.

    The offending line is available as ``data["line"]`` when known.
    """


class ContractViolationError(InternalError, ValueError):
    """Exception raised when a message is built in violation of its schema.

    Examples are constructing a message for a command without a parameter
    schema, passing a field the command does not define, or supplying more
    JOIN keys than channels.
    """


class ConfigError(InternalError):
    """Exception raised when the client configuration cannot be loaded.

    Validation details are available as ``data["errors"]``.
    """


__all__ = [
    "InternalError",
    "ParsingError",
    "ContractViolationError",
    "ConfigError",
]
