"""Kernel PLS: nonlinear, multi-response PLS in a reproducing kernel Hilbert space.

Algorithm (Rosipal & Trejo, 2001), on centered predictors X (n x p) and
centered responses Y (n x q):

1. ``K = k(X, X)``, centered in feature space:
   ``K <- (I - 1/n 1 1^T) K (I - 1/n 1 1^T)``
2. For each component, starting from a seeded random ``u``, repeat until
   ``||u_new - u_old|| <= tol`` or ``max_iter`` iterations:

   - ``t = normalize(K_deflated u)``
   - ``q = Y^T t``
   - ``u = normalize(Y q)``

3. Deflate ``K_deflated <- (I - t t^T) K_deflated (I - t t^T)`` and
   ``Y <- Y - t q^T``; loading ``p = K_deflated^T w / (w^T w)`` with ``w``
   the un-normalized ``t``.
4. ``B = (T^T K U)^-1 Q^T`` with the undeflated centered ``K``.

Prediction centers the new predictors, evaluates the cross kernel against
the training predictors, centers it consistently with the training Gram
matrix, projects onto ``U`` and multiplies by ``B``.

Stopping at ``max_iter`` without reaching ``tol`` is not an error: the
last iterate is used and a warning is logged.

References
----------
- Rosipal, R., Trejo, L.J. (2001). Kernel Partial Least Squares Regression
  in Reproducing Kernel Hilbert Space. Journal of Machine Learning
  Research, 2, 97-123.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from latentpls.core.logging import get_logger
from latentpls.operators.kernels import Kernel, RBFKernel
from latentpls.operators.transforms.preprocessing import Center
from latentpls.utils.linalg import freeze, inverse, l2, l2_sq, normalize, safe_divide

from .base import Algorithm

logger = get_logger(__name__)


@dataclass(frozen=True)
class KernelPLSState:
    K: NDArray        # (n, n) deflated kernel after the last component
    T: NDArray        # (n, k) scores on K
    U: NDArray        # (n, k) scores on Y
    P: NDArray        # (n, k) loadings on K
    Q: NDArray        # (q, k) loadings on Y
    B: NDArray        # (k, q) right-hand side of the regression matrix
    K_orig: NDArray   # (n, n) centered, undeflated kernel
    K_raw: NDArray    # (n, n) uncentered training kernel
    X_train: NDArray  # (n, p) centered training predictors
    center_x: Center
    center_y: Center
    kernel: Kernel
    n_iterations: tuple  # inner-loop iterations per component


def center_kernel(K: NDArray) -> NDArray:
    """Center a square Gram matrix in feature space."""
    n = K.shape[0]
    J = np.eye(n) - np.full((n, n), 1.0 / n)
    return J @ K @ J


def center_cross_kernel(K_test: NDArray, K_train: NDArray) -> NDArray:
    """Center a (m, n) cross kernel against the uncentered (n, n) training kernel.

    Equivalent to :func:`center_kernel` when the test rows are the training rows.
    """
    n = K_train.shape[0]
    m = K_test.shape[0]
    J = np.eye(n) - np.full((n, n), 1.0 / n)
    return (K_test - np.full((m, n), 1.0 / n) @ K_train) @ J


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def initial_vector(n_rows: int, seed: int, component: int) -> NDArray:
    """Pseudo-random start vector for ``component``, seeded by ``seed + component``."""
    rng = np.random.default_rng(seed + component)
    return rng.standard_normal((n_rows, 1))


class KernelPLS(Algorithm):
    """Kernel PLS regression (one or more response columns).

    Parameters
    ----------
    kernel : Kernel, default=None
        Kernel function; ``None`` means ``RBFKernel()``.
    tol : float, default=1e-6
        Inner-loop convergence tolerance on ``||u_new - u_old||``.
    max_iter : int, default=500
        Maximum number of inner-loop iterations per component.
    seed : int, default=0
        Base seed of the start vectors; component ``j`` uses ``seed + j``.

    Examples
    --------
    >>> from latentpls.operators.kernels import PolyKernel
    >>> from latentpls.operators.models.sklearn import KernelPLS, PLSModel
    >>> model = PLSModel(KernelPLS(kernel=PolyKernel(degree=3)), n_components=3)
    """

    matrix_names = ("K", "T", "U", "P", "Q", "B")
    loadings_name = "T"
    max_response_columns = None

    def __init__(self, kernel: Optional[Kernel] = None, tol: float = 1e-6, max_iter: int = 500, seed: int = 0):
        self.kernel = kernel
        self.tol = tol
        self.max_iter = max_iter
        self.seed = seed

    def check(self, X, Y):
        if not isinstance(self.tol, (int, float, np.number)) or not self.tol > 0:
            return f"tol must be positive, got {self.tol!r}"
        if not _is_int(self.max_iter) or self.max_iter < 1:
            return f"max_iter must be a positive integer, got {self.max_iter!r}"
        if not _is_int(self.seed) or self.seed < 0:
            return f"seed must be a non-negative integer, got {self.seed!r}"
        return super().check(X, Y)

    def fit_state(self, X, Y, n_components):
        kernel = self.kernel if self.kernel is not None else RBFKernel()

        center_x = Center().fit(X)
        center_y = Center().fit(Y)
        X_train = center_x.transform(X)
        Y = center_y.transform(Y)

        n_rows = X_train.shape[0]
        n_targets = Y.shape[1]
        I = np.eye(n_rows)

        T = np.zeros((n_rows, n_components))
        U = np.zeros((n_rows, n_components))
        P = np.zeros((n_rows, n_components))
        Q = np.zeros((n_targets, n_components))

        K_raw = kernel.apply_matrix(X_train, X_train)
        K_orig = center_kernel(K_raw)
        k_scale = l2(K_orig)
        y_scale = l2(Y)
        K_deflated = K_orig.copy()
        iterations_used = []

        for component in range(n_components):
            u = initial_vector(n_rows, self.seed, component)
            iterations = 0
            change = self.tol * 10

            while change > self.tol and iterations < self.max_iter:
                # 1) t = K u
                w = K_deflated @ u
                t = normalize(w, what=f"kernel score vector of component {component + 1}", reference=k_scale * l2(u))
                # 2) q = Y^T t
                q = Y.T @ t
                # 3) u = Y q
                u_old = u
                u = normalize(Y @ q, what=f"response score vector of component {component + 1}", reference=y_scale ** 2)

                iterations += 1
                change = l2(u - u_old)

            if change > self.tol:
                logger.warning(
                    "Kernel PLS component %d did not converge in %d iterations (change=%.3g, tol=%.3g)",
                    component + 1, iterations, change, self.tol,
                )
            else:
                logger.debug("Kernel PLS component %d converged after %d iterations", component + 1, iterations)
            iterations_used.append(iterations)

            # Deflate
            part = I - t @ t.T
            K_deflated = part @ K_deflated @ part
            Y = Y - t @ q.T
            p = safe_divide(
                K_deflated.T @ w, l2_sq(w), what=f"kernel loading of component {component + 1}", reference=k_scale ** 2
            )

            T[:, component] = t[:, 0]
            U[:, component] = u[:, 0]
            Q[:, component] = q[:, 0]
            P[:, component] = p[:, 0]

        B = inverse(T.T @ K_orig @ U, what="T^T K U") @ Q.T

        return KernelPLSState(
            K=freeze(K_deflated),
            T=freeze(T),
            U=freeze(U),
            P=freeze(P),
            Q=freeze(Q),
            B=freeze(B),
            K_orig=freeze(K_orig),
            K_raw=freeze(K_raw),
            X_train=freeze(X_train),
            center_x=center_x,
            center_y=center_y,
            kernel=kernel,
            n_iterations=tuple(iterations_used),
        )

    def transform_state(self, state, X):
        X_centered = state.center_x.transform(X)
        K_t = state.kernel.apply_matrix(X_centered, state.X_train)
        K_t = center_cross_kernel(K_t, state.K_raw)
        return K_t @ state.U

    def predict_state(self, state, X):
        Y_hat = self.transform_state(state, X) @ state.B
        return state.center_y.inverse_transform(Y_hat)
