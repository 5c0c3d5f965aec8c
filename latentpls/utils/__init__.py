"""Numerical helpers shared across latentpls."""

from .linalg import (
    as_column,
    dominant_eigenvector,
    freeze,
    inverse,
    l2,
    l2_sq,
    normalize,
    safe_divide,
)

__all__ = [
    "as_column",
    "dominant_eigenvector",
    "freeze",
    "inverse",
    "l2",
    "l2_sq",
    "normalize",
    "safe_divide",
]
