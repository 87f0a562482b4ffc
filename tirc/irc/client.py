"""Connection lifecycle controller.

One ``IRCClient`` owns one server connection: the stream pair, a bounded
outbound queue drained by the sender task and the listener task reading
lines from the server. State changes happen on the event loop only, and
``state`` is the single source of truth for connectivity.
"""

from __future__ import annotations

import asyncio
import logging

from ..constants import (
    CONNECT_TIMEOUT,
    HANDSHAKE_TIMEOUT,
    LISTENER_STOP_TIMEOUT,
    OUTBOUND_QUEUE_SIZE,
    SENDER_DRAIN_TIMEOUT,
    USER_MODE,
    WIRE_ENCODING,
)
from ..errors.handling import log_error
from ..errors.irc import (
    AlreadyConnectedError,
    HandshakeTimeoutError,
    IRCConnectionError,
    NotConnectedError,
)
from ..logs.logger import logger
from .builders import build_nick, build_pass, build_quit, build_user
from .dispatcher import IRCDispatcher
from .models import ConnectionState, Prefix
from .parser import Message, serialize_message

Address = str | tuple[str, int]

# Marks the end of the outbound queue; the sender exits when it dequeues it.
_QUEUE_CLOSED = object()


def split_address(address: Address) -> tuple[str, int]:
    """Split ``"host:port"`` (or ``"[v6]:port"``) into its parts."""
    if isinstance(address, tuple):
        host, port = address
        return host, int(port)
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"Address must look like host:port, got {address!r}")
    return host.strip("[]"), int(port)


class IRCClient:  # pylint: disable=too-many-instance-attributes
    """One IRC session bound to a single server connection.

    ``connect`` registers with the server and starts the sender and listener
    tasks; ``send`` and ``quit`` queue outbound messages; ``disconnect``
    tears the session down. A client connects at most once.
    """

    def __init__(
        self,
        user: str,
        nick: str,
        realname: str,
        host: str = "localhost",
        *,
        queue_size: int = OUTBOUND_QUEUE_SIZE,
        handshake_timeout: float = HANDSHAKE_TIMEOUT,
        connect_timeout: float = CONNECT_TIMEOUT,
    ):
        self.identity = Prefix(nick=nick, host=host, user=user)
        self.realname = realname
        self.address: str | None = None
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.state = ConnectionState.DISCONNECTED
        self.quit_sent = False
        self.queue_size = queue_size
        self.handshake_timeout = handshake_timeout
        self.connect_timeout = connect_timeout
        self.dispatcher = IRCDispatcher(self)
        self._session_started = False
        self._outbound: asyncio.Queue[object] | None = None
        self._outbound_closed = False
        self._blocked_puts: set[asyncio.Future[None]] = set()
        self._inbound: asyncio.Queue[Message | None] | None = None
        self._handshake: asyncio.Future[Message] | None = None
        self._stop_listener = asyncio.Event()
        self._listener_task: asyncio.Task[None] | None = None
        self._sender_task: asyncio.Task[None] | None = None
        self._end_marker_task: asyncio.Task[None] | None = None

    @property
    def nick(self) -> str:
        return self.identity.nick

    @property
    def user(self) -> str:
        return self.identity.user

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def listener_running(self) -> bool:
        return self._listener_task is not None and not self._listener_task.done()

    @property
    def sender_running(self) -> bool:
        return self._sender_task is not None and not self._sender_task.done()

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                nick=self.nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    async def connect(
        self,
        address: Address,
        password: str,
        inbound: asyncio.Queue[Message | None],
    ) -> None:
        """Open the connection, register and wait for the welcome reply.

        Every message not intercepted by the listener is put on ``inbound``;
        ``None`` is put there once the listener stops.

        Raises:
            AlreadyConnectedError: The client already had a session.
            OSError | TimeoutError: The transport could not be opened.
            HandshakeTimeoutError: No welcome reply within ``handshake_timeout``.
                The background tasks keep running; call ``disconnect``.
            IRCConnectionError: The server closed the connection during
                registration.
        """
        if self.state is not ConnectionState.DISCONNECTED or self._session_started:
            raise AlreadyConnectedError(
                "tirc: Client is already connected.",
                nick=self.nick,
                address=self.address,
                operation_type="connect",
            )
        host, port = split_address(address)
        self.address = f"{host}:{port}"
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event("irc", "connect_start", nick=self.nick, server=host, port=port)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=self.connect_timeout
            )
        except (OSError, TimeoutError) as e:
            log_error(
                "Connection failed",
                e,
                context={"nick": self.nick, "address": self.address},
            )
            self._set_state(ConnectionState.DISCONNECTED)
            raise

        self._start_session(inbound)
        await self._send_handshake(password)
        logger.log_event(
            "irc",
            "handshake_sent",
            level=logging.DEBUG,
            nick=self.nick,
            timeout=self.handshake_timeout,
        )
        try:
            # wait_for cancels the future on timeout, so a late 001 is ignored.
            await asyncio.wait_for(self._handshake, timeout=self.handshake_timeout)
        except TimeoutError:
            logger.log_event(
                "irc",
                "handshake_timeout",
                level=logging.ERROR,
                nick=self.nick,
                timeout=self.handshake_timeout,
            )
            raise HandshakeTimeoutError(
                "tirc: Handshake received no reply.",
                nick=self.nick,
                address=self.address,
                operation_type="connect",
                timeout=self.handshake_timeout,
            ) from None
        if self.state is ConnectionState.HANDSHAKING:
            self._set_state(ConnectionState.CONNECTED)
        logger.log_event("irc", "connect_success", nick=self.nick, server=self.address)

    def _start_session(self, inbound: asyncio.Queue[Message | None]) -> None:
        self._session_started = True
        self._handshake = asyncio.get_running_loop().create_future()
        self._outbound = asyncio.Queue(maxsize=self.queue_size)
        self._outbound_closed = False
        self._inbound = inbound
        self._stop_listener.clear()
        self._set_state(ConnectionState.HANDSHAKING)
        self._listener_task = asyncio.create_task(
            self._listen(), name=f"tirc-listener-{self.nick}"
        )
        self._sender_task = asyncio.create_task(
            self._send_loop(), name=f"tirc-sender-{self.nick}"
        )

    async def _send_handshake(self, password: str) -> None:
        if password:
            await self.send(build_pass(password))
        await self.send(build_nick(self.nick))
        await self.send(build_user(self.user, USER_MODE, self.realname))

    def resolve_handshake(self, welcome: Message) -> None:
        """Complete the pending registration; later welcomes are ignored."""
        if self._handshake is None or self._handshake.done():
            logger.log_event(
                "irc", "handshake_duplicate", level=logging.DEBUG, nick=self.nick
            )
            return
        self._handshake.set_result(welcome)
        logger.log_event(
            "irc", "handshake_complete", nick=self.nick, server=str(welcome.prefix)
        )

    def _not_connected(self) -> NotConnectedError:
        return NotConnectedError(
            "tirc: Client has no open connection.",
            nick=self.nick,
            address=self.address,
            operation_type="send",
        )

    async def send(self, message: Message) -> None:
        """Queue ``message`` for the sender task; waits while the queue is full.

        Raises:
            NotConnectedError: No session is open, or the session was torn
                down while this call was waiting for room in the queue.
        """
        if self._outbound is None or self._outbound_closed:
            raise self._not_connected()
        if not self._outbound.full():
            self._outbound.put_nowait(message)
            return
        put = asyncio.ensure_future(self._outbound.put(message))
        self._blocked_puts.add(put)
        try:
            await put
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if self._outbound_closed and not (task and task.cancelling()):
                raise self._not_connected() from None
            raise
        finally:
            self._blocked_puts.discard(put)

    async def quit(self, reason: str = "") -> None:
        """Send QUIT. The connection is closed by the server's ERROR reply
        or by an explicit ``disconnect``.
        """
        await self.send(build_quit(reason))
        self.quit_sent = True
        logger.log_event("irc", "quit_requested", nick=self.nick, reason=reason)

    async def disconnect(self) -> None:
        """Stop both tasks and close the transport. Further calls are no-ops."""
        if self.state is ConnectionState.DISCONNECTING or (
            self.state is ConnectionState.DISCONNECTED and self.writer is None
        ):
            logger.log_event(
                "irc", "disconnect_noop", level=logging.DEBUG, nick=self.nick
            )
            return
        self._set_state(ConnectionState.DISCONNECTING)
        self._stop_listener.set()
        await self._close_outbound()
        await self._close_writer()
        await self._stop_listener_task()
        self.reader = None
        self.writer = None
        self._set_state(ConnectionState.DISCONNECTED)
        logger.log_event("irc", "disconnected", level=logging.WARNING, nick=self.nick)

    async def _close_outbound(self) -> None:
        self._outbound_closed = True
        task = self._sender_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            try:
                await asyncio.wait_for(
                    self._drain_sender(task), timeout=SENDER_DRAIN_TIMEOUT
                )
            except TimeoutError:
                logger.log_event(
                    "irc",
                    "sender_drain_timeout",
                    level=logging.WARNING,
                    nick=self.nick,
                    timeout=SENDER_DRAIN_TIMEOUT,
                )
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
        # Nothing reads the queue any more; callers still waiting get NotConnectedError.
        for put in list(self._blocked_puts):
            put.cancel()

    async def _drain_sender(self, task: asyncio.Task[None]) -> None:
        assert self._outbound is not None
        await self._outbound.put(_QUEUE_CLOSED)
        await task

    async def _close_writer(self) -> None:
        if not self.writer:
            return
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except OSError as e:
            log_error(
                "Error while closing connection",
                e,
                context={"nick": self.nick, "address": self.address},
                level=logging.WARNING,
            )

    async def _stop_listener_task(self) -> None:
        task = self._listener_task
        if task is None or task.done() or task is asyncio.current_task():
            return
        _, pending = await asyncio.wait({task}, timeout=LISTENER_STOP_TIMEOUT)
        if pending:
            logger.log_event(
                "irc",
                "listener_stop_timeout",
                level=logging.WARNING,
                nick=self.nick,
                timeout=LISTENER_STOP_TIMEOUT,
            )
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _send_loop(self) -> None:
        assert self._outbound is not None
        queue = self._outbound
        while True:
            item = await queue.get()
            if item is _QUEUE_CLOSED:
                break
            assert isinstance(item, Message)
            await self._write_message(item)
        logger.log_event("irc", "sender_stopped", level=logging.DEBUG, nick=self.nick)

    async def _write_message(self, message: Message) -> None:
        line = serialize_message(message)
        if self.writer is None:
            logger.log_event(
                "irc", "send_no_transport", level=logging.WARNING, nick=self.nick,
                command=message.command,
            )
            return
        try:
            self.writer.write(line.encode(WIRE_ENCODING))
            await self.writer.drain()
        except (OSError, RuntimeError) as e:
            log_error(
                "Write failed",
                e,
                context={"nick": self.nick, "command": message.command},
            )
            return
        logger.log_event(
            "irc", "send", level=logging.DEBUG, nick=self.nick, line=line.rstrip("\r\n")
        )

    async def _listen(self) -> None:
        assert self.reader is not None and self._inbound is not None
        reader = self.reader
        inbound = self._inbound
        try:
            while not self._stop_listener.is_set():
                try:
                    raw = await reader.readline()
                except ValueError as e:
                    # Line over the reader limit; the reader has already skipped it.
                    log_error(
                        "Dropping oversized line",
                        e,
                        context={"nick": self.nick},
                        level=logging.WARNING,
                    )
                    await asyncio.sleep(0)
                    continue
                except OSError as e:
                    # The reader keeps the exception; every later read fails too.
                    if self._stop_listener.is_set():
                        break
                    log_error("Connection lost", e, context={"nick": self.nick})
                    await self.disconnect()
                    break
                if self._stop_listener.is_set():
                    break
                if not raw:
                    logger.log_event("irc", "eof", level=logging.WARNING, nick=self.nick)
                    await self.disconnect()
                    break
                line = raw.decode(WIRE_ENCODING, errors="replace")
                await self.dispatcher.handle_line(line, inbound)
        finally:
            if self._handshake is not None and not self._handshake.done():
                self._handshake.set_exception(
                    IRCConnectionError(
                        "tirc: Connection closed before registration completed.",
                        nick=self.nick,
                        address=self.address,
                        operation_type="connect",
                    )
                )
            try:
                inbound.put_nowait(None)
            except asyncio.QueueFull:
                # Delivered once the consumer makes room; never blocks shutdown.
                self._end_marker_task = asyncio.create_task(inbound.put(None))
            logger.log_event(
                "irc", "listener_stopped", level=logging.DEBUG, nick=self.nick
            )
