"""Formatters for latentpls log output.

Console output is ASCII-safe by default so that fits running on clusters
or in CI logs do not produce mojibake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Status(str, Enum):
    """Outcome attached to a log record via ``extra={"status": ...}``."""

    STARTING = "starting"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Symbols:
    """ASCII status symbols used by :class:`ConsoleFormatter`."""

    starting: str = ">"
    success: str = "[OK]"
    warning: str = "[!]"
    error: str = "[X]"

    def get_status_symbol(self, status: Optional[Status]) -> str:
        if status is None:
            return ""
        return {
            Status.STARTING: self.starting,
            Status.SUCCESS: self.success,
            Status.WARNING: self.warning,
            Status.ERROR: self.error,
        }.get(status, "")


_COLORS = {
    logging.DEBUG: "\033[2m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
_RESET = "\033[0m"


def format_duration(seconds: float) -> str:
    """Format a duration as ``5.0s``, ``2m 5.4s`` or ``2h 2m 5s``."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return f"{minutes}m {seconds - minutes * 60:.1f}s"
    hours = int(seconds // 3600)
    minutes = int((seconds - hours * 3600) // 60)
    secs = int(seconds - hours * 3600 - minutes * 60)
    return f"{hours}h {minutes}m {secs}s"


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter: ``[!] message`` with optional colors."""

    def __init__(self, use_colors: bool = True, show_level: bool = False) -> None:
        super().__init__()
        self.use_colors = use_colors
        self.symbols = Symbols()
        self.show_level = show_level

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()

        status = getattr(record, "status", None)
        if status is None and record.levelno >= logging.ERROR:
            status = Status.ERROR
        elif status is None and record.levelno >= logging.WARNING:
            status = Status.WARNING

        symbol = self.symbols.get_status_symbol(status)
        parts = []
        if self.show_level:
            parts.append(f"{record.levelname:<7}")
        if symbol:
            parts.append(symbol)
        parts.append(message)
        text = " ".join(parts)

        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"

        if self.use_colors and record.levelno in _COLORS:
            text = f"{_COLORS[record.levelno]}{text}{_RESET}"
        return text


class FileFormatter(logging.Formatter):
    """Machine-parseable formatter for log files."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
