"""Core infrastructure: exceptions and logging."""

from .exceptions import NumericalError, PLSError, ValidationError

__all__ = ["PLSError", "ValidationError", "NumericalError"]
