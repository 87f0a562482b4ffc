"""Command-line entry point: connect, join, print what the server sends."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from collections.abc import Sequence

from .config import ClientConfig, get_configuration
from .constants import INBOUND_QUEUE_SIZE, QUIT_ACK_TIMEOUT
from .errors.handling import log_error
from .errors.internal import ConfigError
from .errors.irc import IRCError
from .irc import IRCClient, Message, build_join
from .logging_config import LoggerConfigurator
from .logs.logger import logger


class SignalHandler:
    """Turns SIGINT/SIGTERM into an asyncio event the main coroutine waits on."""

    def __init__(self) -> None:
        self.shutdown_event = asyncio.Event()

    def stop(self, signum: int | None = None) -> None:
        # Idempotent: only the first signal is logged
        if self.shutdown_event.is_set():
            return
        logger.log_event("app", "signal", level=logging.WARNING, signal=signum)
        self.shutdown_event.set()

    def setup_signal_handlers(self) -> None:  # pragma: no cover
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop, sig)
            except NotImplementedError:
                # Windows event loops do not support signal handlers
                signal.signal(sig, lambda signum, _frame: self.stop(signum))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Minimal IRC client")
    parser.add_argument("--host", help="Server hostname.")
    parser.add_argument("--port", type=int, help="Server port.")
    parser.add_argument("--user", help="Username.")
    parser.add_argument("--nick", help="Nick.")
    parser.add_argument("--name", dest="realname", help="Real name.")
    parser.add_argument("--password", help="Password.")
    parser.add_argument(
        "--channel",
        dest="channels",
        action="append",
        help="Channel to join after registration (repeatable).",
    )
    parser.add_argument("--config", help="Path to a JSON configuration file.")
    return parser.parse_args(argv)


async def consume_inbound(
    client: IRCClient, inbound: asyncio.Queue[Message | None]
) -> int:
    """Log every inbound message until the end marker; returns the count."""
    count = 0
    while (message := await inbound.get()) is not None:
        count += 1
        logger.log_event(
            "app", "inbound", nick=client.nick, line=str(message).rstrip("\r\n")
        )
    return count


async def run_client(config: ClientConfig, shutdown: asyncio.Event) -> int:
    client = IRCClient(config.user, config.nick, config.realname, config.hostname)
    inbound: asyncio.Queue[Message | None] = asyncio.Queue(maxsize=INBOUND_QUEUE_SIZE)
    reader = asyncio.create_task(consume_inbound(client, inbound), name="tirc-reader")
    try:
        await client.connect(config.address, config.password, inbound)
    except (IRCError, OSError, TimeoutError) as e:
        log_error("Connect failed", e, context={"address": config.address})
        await client.disconnect()
        reader.cancel()
        await asyncio.gather(reader, return_exceptions=True)
        return 1

    if config.channels:
        await client.send(build_join(config.channels))
        logger.log_event("app", "join", nick=client.nick, channels=",".join(config.channels))

    waiter = asyncio.create_task(shutdown.wait())
    await asyncio.wait({waiter, reader}, return_when=asyncio.FIRST_COMPLETED)
    waiter.cancel()

    if client.is_connected:
        await client.quit("Leaving")
        # The server answers QUIT with ERROR, which makes the listener disconnect.
        await asyncio.wait({reader}, timeout=QUIT_ACK_TIMEOUT)
    await client.disconnect()
    _, pending = await asyncio.wait({reader}, timeout=QUIT_ACK_TIMEOUT)
    for task in pending:
        task.cancel()
    await asyncio.gather(reader, return_exceptions=True)
    return 0


async def async_main(config: ClientConfig) -> int:
    handler = SignalHandler()
    handler.setup_signal_handlers()
    logger.log_event("app", "start", nick=config.nick, server=config.address)
    try:
        return await run_client(config, handler.shutdown_event)
    finally:
        logger.log_event("app", "shutdown", nick=config.nick)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    LoggerConfigurator().configure()
    overrides = {
        key: getattr(args, key)
        for key in ("host", "port", "user", "nick", "realname", "password", "channels")
    }
    try:
        config = get_configuration(overrides, config_file=args.config)
    except ConfigError as e:
        log_error("Configuration rejected", e, context=e.data)
        return 2
    logger.log_event("app", "config", level=logging.DEBUG, **config.to_dict())
    try:
        return asyncio.run(async_main(config))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        return 130
