"""Inbound message dispatch for the listener task."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..constants import RPL_WELCOME
from ..errors.handling import log_error
from ..errors.internal import ParsingError
from ..errors.irc import NotConnectedError
from ..logs.logger import logger
from .builders import build_pong
from .parser import Message, parse_message

if TYPE_CHECKING:  # pragma: no cover
    from .client import IRCClient

# Handlers return True when the message should still reach the inbound queue.
Handler = Callable[[Message], Awaitable[bool]]


class IRCDispatcher:
    def __init__(self, client: IRCClient):
        self.client = client
        self._handlers: dict[str, Handler] = {
            RPL_WELCOME: self._handle_welcome,
            "PING": self._handle_ping,
            "ERROR": self._handle_error,
        }

    async def handle_line(
        self, raw_line: str, inbound: asyncio.Queue[Message | None]
    ) -> Message | None:
        """Parse ``raw_line``, apply the intercept rules and forward the rest.

        Returns the parsed message, or None when the line could not be parsed.
        """
        try:
            message = parse_message(raw_line)
        except ParsingError as e:
            log_error(
                "Dropping unparsable line",
                e,
                context={"nick": self.client.nick, "line": raw_line.rstrip("\r\n")},
                level=logging.WARNING,
            )
            return None

        logger.log_event(
            "irc",
            "recv",
            level=logging.DEBUG,
            nick=self.client.nick,
            line=raw_line.rstrip("\r\n"),
        )
        handler = self._handlers.get(message.command)
        forward = await handler(message) if handler else True
        if forward:
            await inbound.put(message)
        return message

    async def _handle_welcome(self, message: Message) -> bool:
        self.client.resolve_handshake(message)
        return False

    async def _handle_ping(self, message: Message) -> bool:
        server = message.get("server1")
        try:
            await self.client.send(build_pong(server))
        except NotConnectedError as e:
            # PING raced with disconnect; nobody is left to answer.
            log_error("PONG not sent", e, context={"server": server}, level=logging.DEBUG)
            return False
        logger.log_event(
            "irc", "ping_reply", level=logging.DEBUG, nick=self.client.nick, server=server
        )
        return False

    async def _handle_error(self, message: Message) -> bool:
        reason = message.get("message")
        if not self.client.quit_sent:
            logger.log_event(
                "irc", "error_reply", level=logging.WARNING, nick=self.client.nick, reason=reason
            )
            return True
        logger.log_event("irc", "quit_ack", nick=self.client.nick, reason=reason)
        await self.client.disconnect()
        return False
