"""Process logging setup and structured error reporting for tirc.

``LoggerConfigurator`` installs a colorlog console handler on the root
logger. ``log_structured_error`` is the single sink for error reports coming
from ``tirc.errors.handling.log_error``: it logs one line per error and keeps
a per-category count so a failure that keeps repeating is raised once as a
CRITICAL alert instead of only scrolling by.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any

import colorlog

from .constants import ERROR_ALERT_THRESHOLD

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


@dataclass
class CategoryStats:
    count: int = 0
    last_message: str = ""
    last_context: dict[str, Any] = field(default_factory=dict)
    alerted: bool = False


class ErrorAggregator:
    """Counts reported errors per category (network, parsing, connection...).

    All reports come from the event loop thread, so no locking is needed.
    """

    def __init__(self, alert_threshold: int = ERROR_ALERT_THRESHOLD):
        self.alert_threshold = alert_threshold
        self.categories: dict[str, CategoryStats] = {}

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> bool:
        """Count one occurrence; True exactly once, when the threshold is reached."""
        stats = self.categories.setdefault(error_type, CategoryStats())
        stats.count += 1
        stats.last_message = message
        stats.last_context = dict(context or {})
        if stats.alerted or stats.count < self.alert_threshold:
            return False
        stats.alerted = True
        return True

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        return {
            name: {"count": s.count, "last_message": s.last_message}
            for name, s in self.categories.items()
        }

    def clear(self) -> None:
        self.categories.clear()

    def log_summary_report(self) -> None:
        """Log one line per category that saw errors during this session."""
        log = logging.getLogger("tirc")
        for name, stats in sorted(self.categories.items()):
            log.warning(f"{name} errors this session: {stats.count} (last: {stats.last_message})")


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``message`` tagged with its category and count it.

    The line reads ``[CATEGORY] message | Exception: ... | Context: k=v``.
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    log = logging.getLogger("tirc")
    log.log(level, " | ".join(parts))

    if error_aggregator.record_error(error_type, message, context):
        log.critical(
            f"Repeated {error_type} errors: {error_aggregator.alert_threshold} "
            f"occurrences this session, latest: {message}"
        )


class LoggerConfigurator:
    """Installs the colored console handler for the whole process.

    The level comes from ``config["level"]`` when given, otherwise from the
    ``DEBUG`` environment variable (``true``/``1``/``yes`` selects DEBUG).
    """

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or {}

    def resolve_level(self) -> int:
        if "level" in self.config:
            return self.config["level"]
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def configure(self) -> logging.Handler:
        level = self.resolve_level()
        handler = colorlog.StreamHandler(sys.stderr)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                LOG_FORMAT,
                datefmt=LOG_DATE_FORMAT,
                log_colors=LOG_COLORS,
                secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "bold_red"}},
            )
        )
        logging.basicConfig(level=level, handlers=[handler], force=True)
        logging.getLogger("tirc").setLevel(level)
        # asyncio debug chatter is noise at DEBUG level
        logging.getLogger("asyncio").setLevel(logging.WARNING)
        atexit.register(error_aggregator.log_summary_report)
        return handler
