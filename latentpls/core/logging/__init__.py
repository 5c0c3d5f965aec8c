"""Logging facade for latentpls.

Usage:
    >>> from latentpls.core.logging import get_logger, configure_logging
    >>>
    >>> # Configure once, in the application (never inside the library)
    >>> configure_logging(verbose=2)
    >>>
    >>> # Get logger in each module
    >>> logger = get_logger(__name__)
    >>> logger.debug("Component 1 extracted")
"""

from .config import (
    ROOT_LOGGER_NAME,
    LoggingConfig,
    configure_logging,
    get_config,
    get_logger,
    is_configured,
    reset_logging,
)
from .formatters import (
    ConsoleFormatter,
    FileFormatter,
    Status,
    Symbols,
    format_duration,
)

__all__ = [
    # Main API
    "get_logger",
    "configure_logging",
    # Configuration
    "LoggingConfig",
    "get_config",
    "is_configured",
    "reset_logging",
    "ROOT_LOGGER_NAME",
    # Formatters
    "Status",
    "Symbols",
    "ConsoleFormatter",
    "FileFormatter",
    "format_duration",
]
