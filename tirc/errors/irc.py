"""IRC connection error hierarchy.

This module defines the exceptions surfaced to callers of ``IRCClient``.
Only ``connect`` and ``send`` raise them; failures during a running session
are logged by the background tasks instead.

All exceptions accept additional context parameters for better error tracking.
"""


class IRCError(Exception):
    """Base exception for all connection related errors.

    Args:
        message (str): Error message.
        nick (str | None): Nick of the client that failed.
        address (str | None): Server address involved, when known.
        operation_type (str | None): Operation that failed (e.g. 'connect', 'send').

    Example:
        >>> raise IRCError("Generic error", nick="botn", address="localhost:6667", operation_type="connect")
    """

    def __init__(
        self,
        message: str,
        nick: str | None = None,
        address: str | None = None,
        operation_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.nick = nick
        self.address = address
        self.operation_type = operation_type


class IRCConnectionError(IRCError):
    """Raised when the connection ends before registration completes.

    Example:
        >>> raise IRCConnectionError("Server closed the connection during registration", operation_type="connect")
    """

    pass


class AlreadyConnectedError(IRCError):
    """Raised when ``connect`` is called on a client that already has a session.

    A client connects at most once; create a new client for a new session.
    """

    pass


class HandshakeTimeoutError(IRCError):
    """Raised when the server does not confirm registration in time.

    The listener and sender tasks are still running when this is raised;
    the caller is responsible for calling ``disconnect``.

    Args:
        message (str): Error message.
        timeout (float | None): Seconds waited for the welcome reply.
    """

    def __init__(
        self,
        message: str,
        nick: str | None = None,
        address: str | None = None,
        operation_type: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(message, nick, address, operation_type)
        self.timeout = timeout


class NotConnectedError(IRCError):
    """Raised when a message is sent while no outbound queue is open."""

    pass


__all__ = [
    "IRCError",
    "IRCConnectionError",
    "AlreadyConnectedError",
    "HandshakeTimeoutError",
    "NotConnectedError",
]
