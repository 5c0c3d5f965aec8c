"""PLS1: NIPALS partial least squares for a single response.

For each component j (X and y already preprocessed):

1. ``w_j = normalize(X^T y)``
2. ``t_j = X w_j``
3. ``b_j = (t_j^T y) / (t_j^T t_j)``
4. ``p_j = X^T t_j / (t_j^T t_j)``
5. ``X <- X - t_j p_j^T``, ``y <- y - t_j b_j``

The regression vector ``r_hat = W (P^T W)^-1 b_hat`` applies directly to
preprocessed (undeflated) predictors. Transform and predict replay the
deflation with the stored ``W`` and ``P``.

References
----------
- Statmaster Module 7, PLS1 algorithm.
- Wold, S., Sjostrom, M., Eriksson, L. (2001). PLS-regression: a basic
  tool of chemometrics. Chemometrics and Intelligent Laboratory Systems.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from latentpls.core.logging import get_logger
from latentpls.utils.linalg import as_column, freeze, inverse, l2, l2_sq, normalize, safe_divide

from .base import Algorithm

logger = get_logger(__name__)


@dataclass(frozen=True)
class PLS1State:
    r_hat: NDArray  # (p, 1)
    P: NDArray      # (p, k)
    W: NDArray      # (p, k)
    T: NDArray      # (n, k)
    b_hat: NDArray  # (k, 1)


class PLS1(Algorithm):
    """NIPALS PLS1 regression (exactly one response column).

    A zero-norm weight or score vector (e.g. a constant response after
    centering) raises :class:`~latentpls.core.exceptions.NumericalError`.

    Examples
    --------
    >>> from latentpls.operators.models.sklearn import PLSModel, PLS1
    >>> model = PLSModel(PLS1(), n_components=2)
    """

    matrix_names = ("r_hat", "P", "W", "T", "b_hat")
    loadings_name = "P"

    def fit_state(self, X, Y, n_components):
        X = np.array(X, dtype=np.float64, copy=True)
        y = as_column(Y).copy()
        n_samples, n_features = X.shape
        # Scales of the undeflated data for the zero tests
        x_scale = l2(X)
        y_scale = l2(y)

        W = np.zeros((n_features, n_components))
        P = np.zeros((n_features, n_components))
        T = np.zeros((n_samples, n_components))
        b_hat = np.zeros((n_components, 1))

        for j in range(n_components):
            w = normalize(X.T @ y, what=f"weight vector of component {j + 1}", reference=x_scale * y_scale)
            t = X @ w
            tt = l2_sq(t)
            b = float(safe_divide(t.T @ y, tt, what=f"regression coefficient of component {j + 1}", reference=x_scale ** 2)[0, 0])
            p = safe_divide(X.T @ t, tt, what=f"loading vector of component {j + 1}", reference=x_scale ** 2)

            X -= t @ p.T
            y -= t * b

            W[:, j] = w[:, 0]
            T[:, j] = t[:, 0]
            P[:, j] = p[:, 0]
            b_hat[j, 0] = b
            logger.debug("PLS1 component %d: b=%.6g, ||t||^2=%.6g", j + 1, b, tt)

        r_hat = W @ inverse(P.T @ W, what="P^T W") @ b_hat

        return PLS1State(r_hat=freeze(r_hat), P=freeze(P), W=freeze(W), T=freeze(T), b_hat=freeze(b_hat))

    def _scores(self, state: PLS1State, X: NDArray) -> NDArray:
        X = np.array(X, dtype=np.float64, copy=True)
        n_components = state.W.shape[1]
        T = np.zeros((X.shape[0], n_components))
        for j in range(n_components):
            t = X @ state.W[:, j]
            T[:, j] = t
            X -= np.outer(t, state.P[:, j])
        return T

    def transform_state(self, state, X):
        return self._scores(state, X)

    def predict_state(self, state, X):
        return self._scores(state, X) @ state.b_hat
