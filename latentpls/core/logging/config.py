"""Logging configuration for latentpls.

The library never configures the root logger. Until
:func:`configure_logging` is called, the ``latentpls`` logger only carries
a :class:`logging.NullHandler`, so importing the package is silent.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .formatters import ConsoleFormatter, FileFormatter

ROOT_LOGGER_NAME = "latentpls"

# verbose -> level of the console handler
_VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
    3: logging.DEBUG,
}


@dataclass
class LoggingConfig:
    """Active logging configuration.

    Attributes:
        verbose: 0 = warnings only, 1 = one line per fit, 2+ = per-component detail.
        use_colors: Colorize console output by level.
        log_file: Optional file receiving every record at DEBUG level.
    """

    verbose: int = 0
    use_colors: bool = True
    log_file: Optional[Path] = None


_config: Optional[LoggingConfig] = None
_handlers: list[logging.Handler] = []

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``latentpls`` namespace.

    Args:
        name: Usually ``__name__``. Names outside the package are nested
            under ``latentpls`` so the package configuration applies.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    verbose: int = 1,
    use_colors: bool = True,
    log_file: Optional[Union[str, Path]] = None,
    stream=None,
) -> LoggingConfig:
    """Attach console (and optional file) handlers to the package logger.

    Calling it again replaces the previous configuration.

    Args:
        verbose: Verbosity level, see :class:`LoggingConfig`.
        use_colors: Colorize console output (disabled when the stream is not a TTY).
        log_file: Optional path of a log file.
        stream: Console stream, defaults to ``sys.stderr``.

    Returns:
        The active configuration.
    """
    global _config

    if verbose < 0:
        raise ValueError(f"verbose must be >= 0, got {verbose}")

    reset_logging()

    stream = stream if stream is not None else sys.stderr
    is_tty = hasattr(stream, "isatty") and stream.isatty()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    console = logging.StreamHandler(stream)
    console.setLevel(_VERBOSITY_LEVELS.get(verbose, logging.DEBUG))
    console.setFormatter(ConsoleFormatter(use_colors=use_colors and is_tty, show_level=verbose >= 3))
    logger.addHandler(console)
    _handlers.append(console)

    path = None
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        logger.addHandler(file_handler)
        _handlers.append(file_handler)

    _config = LoggingConfig(verbose=verbose, use_colors=use_colors, log_file=path)
    return _config


def get_config() -> LoggingConfig:
    """Return the active configuration (defaults if not configured)."""
    return _config if _config is not None else LoggingConfig()


def is_configured() -> bool:
    return _config is not None


def reset_logging() -> None:
    """Remove handlers installed by :func:`configure_logging`."""
    global _config

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    logger.setLevel(logging.NOTSET)
    _config = None
