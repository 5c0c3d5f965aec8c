"""Orthogonal PLS (OPLS) for a single response.

Removes the predictor variation that is orthogonal to the response, then
fits an internally owned base model on the filtered predictors.

Starting from ``w = normalize(X^T y)``, for each orthogonal
component:

- ``t = X w / ||w||^2``, ``p = X^T t / ||t||^2``
- ``w_orth = normalize(p - w (w^T p / ||w||^2))``
- ``t_orth = X w_orth / ||w_orth||^2``, ``p_orth = X^T t_orth / ||t_orth||^2``
- ``X <- X - t_orth p_orth^T``

New data is filtered with ``X - (X W_orth) P_orth^T``. The base model is
fitted on the training predictors filtered the same way, so training and
prediction see identical filtering.

References
----------
- Trygg, J., Wold, S. (2002). Orthogonal projections to latent structures
  (O-PLS). Journal of Chemometrics, 16(3), 119-128.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from sklearn.base import clone

from latentpls.core.logging import get_logger
from latentpls.utils.linalg import as_column, freeze, l2, l2_sq, normalize, safe_divide

from .base import Algorithm, PLSModel
from .pls1 import PLS1

logger = get_logger(__name__)


@dataclass(frozen=True)
class OPLSState:
    P_orth: NDArray  # (p, k)
    W_orth: NDArray  # (p, k)
    T_orth: NDArray  # (n, k)
    X_osc: NDArray   # (n, p) training predictors after sequential deflation
    base: PLSModel   # fitted on the filtered training predictors


def default_base() -> PLSModel:
    """Base model used when none is given: one-component PLS1 on centered data."""
    return PLSModel(PLS1(), n_components=1, preprocessing="center")


class OPLS(Algorithm):
    """Orthogonal signal correction followed by a base PLS model.

    ``n_components`` of the surrounding :class:`PLSModel` is the number of
    orthogonal components removed; the base model has its own.

    Parameters
    ----------
    base : PLSModel, default=None
        Unfitted model trained on the filtered predictors. ``None`` means
        :func:`default_base`. Cloned at fit time.

    Examples
    --------
    >>> from latentpls.operators.models.sklearn import OPLS, PLSModel, SIMPLS
    >>> base = PLSModel(SIMPLS(), n_components=1)
    >>> model = PLSModel(OPLS(base=base), n_components=2)
    """

    matrix_names = ("P_orth", "W_orth", "T_orth", "X_osc")
    loadings_name = "P_orth"

    def __init__(self, base: Optional[PLSModel] = None):
        self.base = base

    def check(self, X, Y):
        if self.base is not None and not isinstance(self.base, PLSModel):
            return f"base must be a PLSModel, got {type(self.base).__name__}"
        return super().check(X, Y)

    def fit_state(self, X, Y, n_components):
        X_orig = np.asarray(X, dtype=np.float64)
        X = X_orig.copy()
        y = as_column(Y)
        n_samples, n_features = X.shape
        x_scale = l2(X)

        W_orth = np.zeros((n_features, n_components))
        P_orth = np.zeros((n_features, n_components))
        T_orth = np.zeros((n_samples, n_components))

        w = normalize(X.T @ y, what="initial weight vector", reference=x_scale * l2(y))

        for j in range(n_components):
            # Scores and loadings of the current residual
            t = X @ w / l2_sq(w)
            p = safe_divide(X.T @ t, l2_sq(t), what=f"loading of component {j + 1}", reference=x_scale ** 2)

            # Orthogonalize the loading against w
            w_orth = normalize(p - w * ((w.T @ p).item() / l2_sq(w)), what=f"orthogonal weight of component {j + 1}")
            t_orth = X @ w_orth / l2_sq(w_orth)
            p_orth = safe_divide(
                X.T @ t_orth, l2_sq(t_orth), what=f"orthogonal loading of component {j + 1}", reference=x_scale ** 2
            )

            # Remove the orthogonal component
            X -= t_orth @ p_orth.T

            W_orth[:, j] = w_orth[:, 0]
            T_orth[:, j] = t_orth[:, 0]
            P_orth[:, j] = p_orth[:, 0]
            logger.debug("OPLS orthogonal component %d: ||t_orth||^2=%.6g", j + 1, l2_sq(t_orth))

        base = clone(self.base) if self.base is not None else default_base()
        base.fit(self._filter(X_orig, W_orth, P_orth), y)

        return OPLSState(
            P_orth=freeze(P_orth),
            W_orth=freeze(W_orth),
            T_orth=freeze(T_orth),
            X_osc=freeze(X),
            base=base,
        )

    @staticmethod
    def _filter(X: NDArray, W_orth: NDArray, P_orth: NDArray) -> NDArray:
        T = X @ W_orth
        return X - T @ P_orth.T

    def transform_state(self, state, X):
        return self._filter(np.asarray(X, dtype=np.float64), state.W_orth, state.P_orth)

    def predict_state(self, state, X):
        y_pred = state.base.predict(self.transform_state(state, X))
        return as_column(y_pred)
