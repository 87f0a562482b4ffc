"""tirc: a small asyncio IRC client."""

__version__ = "0.1.0"
