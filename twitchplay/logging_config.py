"""
Console logging and error bookkeeping for hosts of the chat client.

The package itself only emits records (see ``twitchplay.logs``). A host that
wants readable console output calls ``LoggerConfigurator().configure()`` once;
records from the connection worker thread and the consumer thread then share
one colorized stream, tagged with the thread that produced them.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, TextIO

import colorlog

DEBUG_ENV_VALUES = ("true", "1", "yes")
RECENT_WINDOW_SECONDS = 3600

LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s "
    "%(thin)s%(threadName)-22s%(reset)s %(message_log_color)s%(message)s"
)
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


@dataclass(slots=True)
class ErrorRecord:
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class ErrorAggregator:
    """Keeps the most recent errors per category for an end-of-run summary.

    The worker thread and the consumer thread both record here.
    """

    def __init__(self, max_per_type: int = 1000):
        self.max_per_type = max_per_type
        self.start_time = time.time()
        self._errors: dict[str, deque[ErrorRecord]] = {}
        self._totals: dict[str, int] = {}
        self._lock = threading.Lock()

    def record_error(self, error_type: str, message: str, context: dict[str, Any] | None = None) -> None:
        with self._lock:
            bucket = self._errors.setdefault(error_type, deque(maxlen=self.max_per_type))
            bucket.append(ErrorRecord(message, dict(context or {})))
            self._totals[error_type] = self._totals.get(error_type, 0) + 1

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        """Counts per category.

        ``total_count`` covers the retained records only; ``seen_count`` counts
        every error recorded since the last ``clear``.
        """
        now = time.time()
        with self._lock:
            summary: dict[str, dict[str, Any]] = {}
            for error_type, records in self._errors.items():
                last = records[-1] if records else None
                summary[error_type] = {
                    "total_count": len(records),
                    "seen_count": self._totals.get(error_type, 0),
                    "recent_count": sum(
                        1 for r in records if now - r.timestamp < RECENT_WINDOW_SECONDS
                    ),
                    "last_occurrence": (
                        {"message": last.message, "context": last.context, "timestamp": last.timestamp}
                        if last
                        else None
                    ),
                }
            return summary

    def clear(self) -> None:
        with self._lock:
            self._errors.clear()
            self._totals.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.info("No errors recorded in current session")
            return
        logging.warning("🚨 ERROR SUMMARY REPORT")
        for error_type, stats in sorted(summary.items()):
            logging.warning(
                f"  {error_type}: {stats['total_count']} total, "
                f"{stats['recent_count']} in last hour"
            )
            if stats["last_occurrence"]:
                logging.warning(f"    Last: {stats['last_occurrence']['message']}")


# Shared by every connection in the process
error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error as one ``[TYPE] message | Exception | Context`` line.

    Args:
        error_type: Category of the error (e.g. 'network', 'auth', 'send')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional key/value data for debugging
        level: Logging level (default: ERROR)
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))
    error_aggregator.record_error(error_type, message, context)


def _debug_requested() -> bool:
    return os.environ.get("DEBUG", "").lower() in DEBUG_ENV_VALUES


class LoggerConfigurator:
    """Installs a colorlog console handler on the root logger.

    Recognised ``config`` keys:
        level: explicit log level; otherwise DEBUG env selects DEBUG vs INFO.
        stream: output stream (default ``sys.stderr``).
        summary_on_exit: log the error summary at interpreter exit (default True).
    """

    def __init__(self, config=None):
        self.config = config or {}
        self.handler: logging.Handler | None = None

    def _level(self) -> int:
        if "level" in self.config:
            return self.config["level"]
        return logging.DEBUG if _debug_requested() else logging.INFO

    def configure(self):
        """Attach the colored handler and return its formatter.

        Calling it again replaces the handler installed by this configurator
        instead of stacking a second one.
        """
        formatter = colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%H:%M:%S",
            log_colors=LEVEL_COLORS,
            secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
            reset=True,
        )
        stream: TextIO = self.config.get("stream", sys.stderr)
        handler = colorlog.StreamHandler(stream)
        handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        if self.handler is not None:
            root_logger.removeHandler(self.handler)
        root_logger.addHandler(handler)
        root_logger.setLevel(self._level())
        self.handler = handler

        if self.config.get("summary_on_exit", True):
            atexit.register(self._log_final_error_summary)
        return formatter

    def _log_final_error_summary(self):
        logging.info("📊 Final error summary before shutdown:")
        error_aggregator.log_summary_report()
