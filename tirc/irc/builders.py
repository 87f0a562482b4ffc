"""Constructors for the commands the client sends.

Each builder maps its arguments onto the command's parameter schema and
goes through ``new_message``. See RFC 2812 for the command semantics.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..constants import JOIN_ALL_CHANNEL
from ..errors.internal import ContractViolationError
from .models import Prefix
from .parser import Message, new_message


def build_pass(password: str, prefix: Prefix | None = None) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.1.1
    return new_message("PASS", {"password": password}, prefix)


def build_nick(nick: str, prefix: Prefix | None = None) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.1.2
    return new_message("NICK", {"nick": nick}, prefix)


def build_user(
    user: str, mode: str, realname: str, prefix: Prefix | None = None
) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.1.3
    return new_message(
        "USER", {"user": user, "mode": mode, "realname": realname}, prefix
    )


def build_quit(message: str = "", prefix: Prefix | None = None) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.1.7
    return new_message("QUIT", {"message": message}, prefix)


def build_join(
    channels: Sequence[str],
    keys: Sequence[str] | None = None,
    prefix: Prefix | None = None,
) -> Message:
    """JOIN one or more channels, optionally with keys.

    Keys pair with channels by position. An empty channel list sends the
    literal channel ``"0"``.

    Raises:
        ContractViolationError: More keys than channels.
    """
    # https://tools.ietf.org/html/rfc2812#section-3.2.1
    keys = list(keys or [])
    if len(keys) > len(channels):
        raise ContractViolationError(
            f"Too many keys ({len(keys)}) to join ({len(channels)}) channels.",
            data={"channels": list(channels), "keys": len(keys)},
        )
    return new_message(
        "JOIN",
        {
            "channels": ",".join(channels) if channels else JOIN_ALL_CHANNEL,
            "keys": ",".join(keys),
        },
        prefix,
    )


def build_privmsg(target: str, text: str, prefix: Prefix | None = None) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.3.1
    return new_message("PRIVMSG", {"msgtarget": target, "text": text}, prefix)


def build_ping(
    server1: str, server2: str = "", prefix: Prefix | None = None
) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.7.2
    return new_message("PING", {"server1": server1, "server2": server2}, prefix)


def build_pong(
    server: str, server2: str = "", prefix: Prefix | None = None
) -> Message:
    # https://tools.ietf.org/html/rfc2812#section-3.7.3
    return new_message("PONG", {"server": server, "server2": server2}, prefix)


__all__ = [
    "build_join",
    "build_nick",
    "build_pass",
    "build_ping",
    "build_pong",
    "build_privmsg",
    "build_quit",
    "build_user",
]
