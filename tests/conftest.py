import asyncio
import os

import pytest
import pytest_asyncio

# Keep lifecycle tests fast; production defaults are seconds.
os.environ.setdefault("SENDER_DRAIN_TIMEOUT", "0.5")
os.environ.setdefault("LISTENER_STOP_TIMEOUT", "0.5")
os.environ.setdefault("QUIT_ACK_TIMEOUT", "0.5")

from tests.fixtures.irc_server import FakeIRCServer  # noqa: E402
from tirc.irc import IRCClient  # noqa: E402
from tirc.logging_config import error_aggregator  # noqa: E402


@pytest_asyncio.fixture
async def irc_server():
    server = FakeIRCServer()
    await server.start()
    yield server
    await server.stop()


@pytest_asyncio.fixture
async def silent_server():
    """Server that never completes registration."""
    server = FakeIRCServer(auto_welcome=False)
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def client():
    return IRCClient("botu", "botn", "cool guy", "localhost")


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    error_aggregator.clear()
    yield
    error_aggregator.clear()
