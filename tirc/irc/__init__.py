"""IRC subsystem package.

Contains the message codec (schema, parser, builders) and the connection
controller with its inbound dispatcher.
"""

from .builders import (  # noqa: F401
    build_join,
    build_nick,
    build_pass,
    build_ping,
    build_pong,
    build_privmsg,
    build_quit,
    build_user,
)
from .client import IRCClient, split_address  # noqa: F401
from .dispatcher import IRCDispatcher  # noqa: F401
from .models import ConnectionState, Prefix  # noqa: F401
from .parser import (  # noqa: F401
    Message,
    new_message,
    parse_message,
    parse_prefix,
    serialize_message,
)
from .schema import COMMAND_SCHEMAS, REPLY_SCHEMA, get_param_schema, is_reply  # noqa: F401

__all__ = [
    "COMMAND_SCHEMAS",
    "REPLY_SCHEMA",
    "ConnectionState",
    "IRCClient",
    "IRCDispatcher",
    "Message",
    "Prefix",
    "build_join",
    "build_nick",
    "build_pass",
    "build_ping",
    "build_pong",
    "build_privmsg",
    "build_quit",
    "build_user",
    "get_param_schema",
    "is_reply",
    "new_message",
    "parse_message",
    "parse_prefix",
    "serialize_message",
    "split_address",
]
