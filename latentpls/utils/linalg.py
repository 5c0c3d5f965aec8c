"""Small dense linear-algebra helpers shared by the PLS algorithms.

Every helper raises :class:`~latentpls.core.exceptions.NumericalError`
instead of returning NaN/inf, so that a degenerate fit fails loudly.
"""

from __future__ import annotations

import numpy as np
import scipy.linalg
from numpy.typing import NDArray

from latentpls.core.exceptions import NumericalError

# Relative tolerance: a norm at or below ZERO_NORM * reference is treated as zero.
ZERO_NORM = 1e-12


def as_column(v: NDArray) -> NDArray:
    """Return ``v`` as an (n, 1) float64 column."""
    return np.asarray(v, dtype=np.float64).reshape(-1, 1)


def l2(v: NDArray) -> float:
    """Euclidean norm of a vector (any shape, flattened)."""
    return float(np.linalg.norm(np.ravel(v)))


def l2_sq(v: NDArray) -> float:
    """Squared Euclidean norm of a vector."""
    flat = np.ravel(v)
    return float(flat @ flat)


def normalize(v: NDArray, what: str = "vector", reference: float = 1.0) -> NDArray:
    """Return ``v / ||v||``.

    ``reference`` is the magnitude ``v`` would have for non-degenerate input
    (e.g. ``||X|| * ||y||`` for ``X^T y``), so the zero test does not depend
    on the units of the data.

    Raises
    ------
    NumericalError
        If ``v`` has (numerically) zero norm or contains non-finite values.
    """
    norm = l2(v)
    if not np.isfinite(norm):
        raise NumericalError(f"Cannot normalize {what}: non-finite entries")
    if norm <= ZERO_NORM * reference:
        raise NumericalError(f"Cannot normalize {what}: zero norm (degenerate or collinear input)")
    return v / norm


def safe_divide(numerator: NDArray, denominator: float, what: str = "value", reference: float = 1.0) -> NDArray:
    """Divide by a scalar that must be non-zero relative to ``reference``."""
    if not np.isfinite(denominator) or abs(denominator) <= ZERO_NORM * reference:
        raise NumericalError(f"Division by zero while computing {what}")
    return numerator / denominator


def inverse(matrix: NDArray, what: str = "matrix") -> NDArray:
    """Invert a square matrix, rejecting singular or ill-conditioned input."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if not np.all(np.isfinite(matrix)):
        raise NumericalError(f"Cannot invert {what}: non-finite entries")
    try:
        result = scipy.linalg.inv(matrix)
    except (np.linalg.LinAlgError, ValueError) as exc:
        raise NumericalError(f"Cannot invert {what}: {exc}") from exc
    if not np.all(np.isfinite(result)):
        raise NumericalError(f"Cannot invert {what}: matrix is singular")
    # scipy only warns for ill-conditioned input
    if np.linalg.cond(matrix) > 1.0 / np.finfo(np.float64).eps:
        raise NumericalError(f"Cannot invert {what}: matrix is singular to working precision")
    return result


def dominant_eigenvector(matrix: NDArray) -> NDArray:
    """Eigenvector of the eigenvalue with the largest magnitude.

    ``matrix`` must be symmetric (e.g. ``A.T @ A``). Returned as a column.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if not np.all(np.isfinite(matrix)):
        raise NumericalError("Cannot compute eigenvectors: non-finite entries")
    try:
        values, vectors = scipy.linalg.eigh(matrix)
    except (np.linalg.LinAlgError, ValueError) as exc:
        raise NumericalError(f"Eigen-decomposition failed: {exc}") from exc
    index = int(np.argmax(np.abs(values)))
    return vectors[:, index:index + 1]


def freeze(array: NDArray) -> NDArray:
    """Return a read-only float64 copy of ``array``."""
    frozen = np.array(array, dtype=np.float64, copy=True)
    frozen.flags.writeable = False
    return frozen
