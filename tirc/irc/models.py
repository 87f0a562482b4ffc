"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    HANDSHAKING = auto()
    CONNECTED = auto()
    DISCONNECTING = auto()


@dataclass(frozen=True, slots=True)
class Prefix:
    """Originator of a message: ``servername / nick [ [ "!" user ] "@" host ]``.

    Server originated messages carry the server name in ``nick``.
    """

    nick: str = ""
    host: str = ""
    user: str = ""

    def __str__(self) -> str:
        if not self.nick:
            return ""
        s = self.nick
        if self.host:
            if self.user:
                s += f"!{self.user}"
            s += f"@{self.host}"
        return s

    def __bool__(self) -> bool:
        return bool(self.nick)
