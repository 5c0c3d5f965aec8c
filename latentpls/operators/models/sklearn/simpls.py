"""SIMPLS partial least squares for a single response (de Jong, 1993).

Works on the cross-product matrices instead of deflating X:

- ``A = X^T y``, ``M = X^T X``, ``C = I``
- for each component h:

  1. ``q`` = dominant eigenvector of ``A^T A``
  2. ``w = A q``, ``w <- w / sqrt(w^T M w)``
  3. ``p = M w``
  4. ``q' = A^T w``
  5. ``v = normalize(C p)``
  6. ``C <- C - v v^T``, ``M <- M - p p^T``
  7. ``A <- C A``

The regression matrix ``B = W Q'^T`` applies directly to preprocessed
predictors; transform is ``X W``.

References
----------
- de Jong, S. (1993). SIMPLS: An alternative approach to partial least
  squares regression. Chemometrics and Intelligent Laboratory Systems,
  18(3), 251-263.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from latentpls.core.exceptions import NumericalError
from latentpls.core.logging import get_logger
from latentpls.utils.linalg import ZERO_NORM, as_column, dominant_eigenvector, freeze, l2, normalize

from .base import Algorithm

logger = get_logger(__name__)


@dataclass(frozen=True)
class SIMPLSState:
    W: NDArray  # (p, k), sparsified when num_coefficients > 0
    P: NDArray  # (p, k)
    Q: NDArray  # (1, k)
    B: NDArray  # (p, 1)


def slim(W: NDArray, num_coefficients: int) -> NDArray:
    """Zero all but the ``num_coefficients`` largest-magnitude entries per column.

    ``num_coefficients <= 0`` or a value not smaller than the number of rows
    keeps the column unchanged. Entries tied in magnitude are ranked by row
    index (the earlier row is kept), so every column keeps exactly
    ``min(num_coefficients, n_rows)`` entries.

    Parameters
    ----------
    W : ndarray of shape (n_features, n_components)
        Weight matrix (not modified).
    num_coefficients : int
        Number of coefficients to keep per column, 0 keeps all.

    Returns
    -------
    W_slim : ndarray of shape (n_features, n_components)
    """
    W = np.array(W, dtype=np.float64, copy=True)
    n_rows = W.shape[0]
    if num_coefficients <= 0 or num_coefficients >= n_rows:
        return W
    for i in range(W.shape[1]):
        order = np.argsort(-np.abs(W[:, i]), kind="stable")
        W[order[num_coefficients:], i] = 0.0
    return W


class SIMPLS(Algorithm):
    """SIMPLS regression (exactly one response column).

    Parameters
    ----------
    num_coefficients : int, default=0
        Number of weight coefficients to keep per component (largest
        magnitude first); the rest are zeroed. 0 keeps all.

    Examples
    --------
    >>> from latentpls.operators.models.sklearn import PLSModel, SIMPLS
    >>> model = PLSModel(SIMPLS(num_coefficients=3), n_components=2)
    """

    matrix_names = ("W", "P", "Q", "B")
    loadings_name = "W"

    def __init__(self, num_coefficients: int = 0):
        self.num_coefficients = num_coefficients

    def check(self, X, Y):
        if self.num_coefficients < 0:
            return f"num_coefficients must be >= 0, got {self.num_coefficients}"
        return super().check(X, Y)

    def fit_state(self, X, Y, n_components):
        X = np.asarray(X, dtype=np.float64)
        y = as_column(Y)
        n_features = X.shape[1]
        x_scale = l2(X)
        y_scale = l2(y)

        A = X.T @ y
        M = X.T @ X
        C = np.eye(n_features)
        W = np.zeros((n_features, n_components))
        P = np.zeros((n_features, n_components))
        Q = np.zeros((1, n_components))

        for h in range(n_components):
            # 1. q as dominant eigenvector of A^T A
            q = dominant_eigenvector(A.T @ A)

            # 2. w = A q, scaled to unit M-norm
            w = normalize(A @ q, what=f"weight vector of component {h + 1}", reference=x_scale * y_scale)
            c = float((w.T @ M @ w)[0, 0])
            if not np.isfinite(c) or c <= ZERO_NORM * x_scale ** 2:
                raise NumericalError(
                    f"Cannot scale weight vector of component {h + 1}: w^T M w = {c:.3g} (degenerate or collinear input)"
                )
            w = w / np.sqrt(c)
            W[:, h] = w[:, 0]

            # 3. p = M w
            p = M @ w
            P[:, h] = p[:, 0]

            # 4. q' = A^T w
            Q[:, h] = (A.T @ w)[:, 0]

            # 5. v = C p, normalized
            v = normalize(C @ p, what=f"deflation direction of component {h + 1}", reference=x_scale)

            # 6. C <- C - v v^T, M <- M - p p^T
            C = C - v @ v.T
            M = M - p @ p.T

            # 7. A <- C A
            A = C @ A
            logger.debug("SIMPLS component %d: q'=%.6g", h + 1, Q[0, h])

        if self.num_coefficients > 0:
            W = slim(W, self.num_coefficients)
        B = W @ Q.T

        return SIMPLSState(W=freeze(W), P=freeze(P), Q=freeze(Q), B=freeze(B))

    def transform_state(self, state, X):
        return np.asarray(X, dtype=np.float64) @ state.W

    def predict_state(self, state, X):
        return np.asarray(X, dtype=np.float64) @ state.B
