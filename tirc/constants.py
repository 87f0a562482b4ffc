"""
Configuration constants for the tirc IRC client

This module contains the tunables used by the connection pipeline.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Same contract as ``_get_env_int`` for floating point values.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Queue sizing
OUTBOUND_QUEUE_SIZE = _get_env_int(
    "OUTBOUND_QUEUE_SIZE", 25
)  # Messages buffered before send() blocks the caller
INBOUND_QUEUE_SIZE = _get_env_int(
    "INBOUND_QUEUE_SIZE", 25
)  # Messages buffered for the inbound consumer

# Connection timings (seconds)
CONNECT_TIMEOUT = _get_env_float(
    "CONNECT_TIMEOUT", 10.0
)  # Timeout for opening the TCP connection
HANDSHAKE_TIMEOUT = _get_env_float(
    "HANDSHAKE_TIMEOUT", 3.0
)  # Time allowed between registration and RPL_WELCOME (001)
SENDER_DRAIN_TIMEOUT = _get_env_float(
    "SENDER_DRAIN_TIMEOUT", 2.0
)  # How long disconnect waits for queued messages to be written
LISTENER_STOP_TIMEOUT = _get_env_float(
    "LISTENER_STOP_TIMEOUT", 2.0
)  # How long disconnect waits for the listener before cancelling it
QUIT_ACK_TIMEOUT = _get_env_float(
    "QUIT_ACK_TIMEOUT", 2.0
)  # How long the app waits for the server to close after QUIT

# Server defaults
DEFAULT_HOST = os.getenv("TIRC_DEFAULT_HOST", "localhost")
DEFAULT_PORT = _get_env_int("TIRC_DEFAULT_PORT", 6667)
DEFAULT_CONFIG_FILE = "tirc.conf"

# Registration
USER_MODE = "0"  # Mode sent in USER during registration
RESERVED_PLACEHOLDER = "*"  # Value for unused parameter slots (e.g. USER's third slot)
JOIN_ALL_CHANNEL = "0"  # Channel sent by JOIN when no channels are given
RPL_WELCOME = "001"

# Line encoding
LINE_TERMINATOR = "\r\n"
WIRE_ENCODING = "utf-8"

# Error reporting
ERROR_ALERT_THRESHOLD = _get_env_int(
    "ERROR_ALERT_THRESHOLD", 10
)  # Occurrences of one error category before a single CRITICAL alert
