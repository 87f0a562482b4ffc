"""Positional parameter schemas per command.

Each schema lists the semantic field name of every positional parameter
slot, in order. ``"_"`` marks a reserved slot (see RFC 2812 3.1.3).
Numeric replies share one generic ``target``/``reply`` schema.
"""

from __future__ import annotations

from types import MappingProxyType

ParamSchema = tuple[str, ...]

RESERVED_FIELD = "_"

_COMMAND_SCHEMAS: dict[str, ParamSchema] = {
    # Connection registration
    "PASS": ("password",),
    "NICK": ("nick",),
    "USER": ("user", "mode", RESERVED_FIELD, "realname"),
    "QUIT": ("message",),
    # Channel operations
    "JOIN": ("channels", "keys"),
    # Sending messages
    "PRIVMSG": ("msgtarget", "text"),
    # Miscellaneous messages
    "PING": ("server1", "server2"),
    "PONG": ("server", "server2"),
    "ERROR": ("message",),
}

COMMAND_SCHEMAS = MappingProxyType(_COMMAND_SCHEMAS)
REPLY_SCHEMA: ParamSchema = ("target", "reply")


def is_reply(command: str) -> bool:
    """True for numeric reply codes such as ``"001"`` or ``"265"``."""
    return bool(command) and command.isascii() and command.isdigit()


def get_param_schema(command: str) -> ParamSchema | None:
    """Return the schema for ``command`` or None when it has none."""
    schema = COMMAND_SCHEMAS.get(command)
    if schema is None and is_reply(command):
        return REPLY_SCHEMA
    return schema


__all__ = [
    "COMMAND_SCHEMAS",
    "REPLY_SCHEMA",
    "RESERVED_FIELD",
    "ParamSchema",
    "get_param_schema",
    "is_reply",
]
