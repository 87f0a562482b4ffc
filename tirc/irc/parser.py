"""IRC message parsing and serialization.

Wire format (RFC 2812 section 2.3.1)::

    [":" prefix " "] command [params] "\r\n"

The last parameter may be introduced by ``:`` and then contain spaces.
Serialization always marks the last present parameter with ``:``; parsing
only treats a parameter as trailing when it carries the marker.

The trailing parameter starts at a leading ``:`` or at the first ``" :"``,
never at a colon inside a middle parameter, so ``JOIN #chan:x`` keeps
``#chan:x`` as one middle parameter.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import takewhile
from types import MappingProxyType

from ..constants import LINE_TERMINATOR, RESERVED_PLACEHOLDER
from ..errors.internal import ContractViolationError, ParsingError
from .models import Prefix
from .schema import RESERVED_FIELD, get_param_schema, is_reply


@dataclass(frozen=True, slots=True)
class Message:
    command: str
    params: tuple[str, ...] = ()
    prefix: Prefix = field(default_factory=Prefix)

    @property
    def fields(self) -> Mapping[str, str]:
        """Field name -> value view of ``params`` through the command schema.

        Slots past the end of ``params`` are left out; empty slots map to ``""``.
        """
        schema = get_param_schema(self.command) or ()
        return MappingProxyType(
            {name: self.params[i] for i, name in enumerate(schema) if i < len(self.params)}
        )

    def get(self, name: str, default: str = "") -> str:
        return self.fields.get(name, default)

    @property
    def is_reply(self) -> bool:
        return is_reply(self.command)

    def __str__(self) -> str:
        return serialize_message(self)


def parse_prefix(raw: str) -> Prefix:
    # servername / ( nickname [ [ "!" user ] "@" host ] )
    left, at, host = raw.partition("@")
    nick, _, user = left.partition("!")
    if not at:
        # Without a host the user part is not populated.
        return Prefix(nick=nick)
    return Prefix(nick=nick, host=host, user=user)


def parse_message(line: str) -> Message:
    """Parse one protocol line into a ``Message``.

    Raises:
        ParsingError: The line is empty or has a prefix but no command.
    """
    raw = line
    line = line.rstrip("\r\n")
    if not line.strip():
        raise ParsingError("Empty protocol line", data={"line": raw})
    line = line.lstrip()

    prefix = Prefix()
    if line.startswith(":"):
        raw_prefix, _, line = line[1:].partition(" ")
        prefix = parse_prefix(raw_prefix)
        line = line.lstrip(" ")
        if not line:
            raise ParsingError("Protocol line has no command", data={"line": raw})

    command, _, rest = line.partition(" ")
    params = _split_params(rest)
    if is_reply(command) and len(params) > 2:
        # Reply text may have been split on spaces; keep target + free text.
        params = [params[0], " ".join(params[1:])]
    return Message(command=command, params=tuple(params), prefix=prefix)


def _split_params(rest: str) -> list[str]:
    rest = rest.lstrip(" ")
    trailing: str | None = None
    if rest.startswith(":"):
        middle, trailing = "", rest[1:]
    elif " :" in rest:
        middle, trailing = rest.split(" :", 1)
    else:
        middle = rest
    params = middle.split()
    if trailing is not None:
        params.append(trailing)
    return params


def serialize_message(message: Message) -> str:
    """Render ``message`` as a CRLF terminated wire line.

    Parameters are emitted up to the first empty slot; the last emitted one
    always gets the ``:`` trailing marker.
    """
    parts: list[str] = []
    if message.prefix:
        parts.append(f":{message.prefix}")
    parts.append(message.command)
    present = list(takewhile(bool, message.params))
    if present:
        parts.extend(present[:-1])
        parts.append(f":{present[-1]}")
    return " ".join(parts) + LINE_TERMINATOR


def new_message(
    command: str,
    params: Mapping[str, str] | None = None,
    prefix: Prefix | None = None,
) -> Message:
    """Build a message for ``command`` from field values.

    Only non-empty values are stored; the reserved ``_`` slot is filled
    automatically.

    Raises:
        ContractViolationError: ``command`` has no schema, or ``params``
            names a field the schema does not define.
    """
    schema = get_param_schema(command)
    if schema is None:
        raise ContractViolationError(
            f"Unrecognized command: {command}", data={"command": command}
        )
    params = dict(params or {})
    unknown = set(params) - set(schema)
    if unknown:
        raise ContractViolationError(
            f"Unknown fields for {command}: {', '.join(sorted(unknown))}",
            data={"command": command, "fields": sorted(unknown)},
        )
    params[RESERVED_FIELD] = RESERVED_PLACEHOLDER
    values = tuple(params.get(name) or "" for name in schema)
    return Message(command=command, params=values, prefix=prefix or Prefix())


__all__ = [
    "Message",
    "new_message",
    "parse_message",
    "parse_prefix",
    "serialize_message",
]
