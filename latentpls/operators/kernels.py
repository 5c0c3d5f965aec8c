"""Kernel functions for Kernel PLS.

Each kernel maps a pair of feature vectors to a scalar similarity
(:meth:`apply`) and a pair of sample matrices to their Gram matrix
(:meth:`apply_matrix`). Gram matrices are computed with
:mod:`sklearn.metrics.pairwise`.

Classes:
    LinearKernel: ``k(a, b) = <a, b>``
    PolyKernel: ``k(a, b) = (gamma * <a, b> + coef0) ** degree``
    RBFKernel: ``k(a, b) = exp(-gamma * ||a - b||^2)``
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray
from sklearn.base import BaseEstimator
from sklearn.metrics.pairwise import linear_kernel, polynomial_kernel, rbf_kernel


class KernelType(str, Enum):
    LINEAR = "linear"
    POLY = "poly"
    RBF = "rbf"


class Kernel(BaseEstimator):
    """Base class for kernels; subclasses implement :meth:`apply_matrix`."""

    def apply(self, a: ArrayLike, b: ArrayLike) -> float:
        """Kernel value between two feature vectors."""
        a = np.asarray(a, dtype=np.float64).reshape(1, -1)
        b = np.asarray(b, dtype=np.float64).reshape(1, -1)
        if a.shape[1] != b.shape[1]:
            raise ValueError(f"Vectors differ in length: {a.shape[1]} != {b.shape[1]}")
        return float(self.apply_matrix(a, b)[0, 0])

    def apply_matrix(self, A: ArrayLike, B: ArrayLike) -> NDArray[np.floating]:
        """Gram matrix ``G[i, j] = k(A[i], B[j])``."""
        raise NotImplementedError


class LinearKernel(Kernel):
    """Linear (dot product) kernel."""

    def apply_matrix(self, A, B):
        return linear_kernel(np.asarray(A, dtype=np.float64), np.asarray(B, dtype=np.float64))


class PolyKernel(Kernel):
    """Polynomial kernel ``(gamma * <a, b> + coef0) ** degree``."""

    def __init__(self, degree: int = 2, gamma: float = 1.0, coef0: float = 1.0):
        self.degree = degree
        self.gamma = gamma
        self.coef0 = coef0

    def apply_matrix(self, A, B):
        return polynomial_kernel(
            np.asarray(A, dtype=np.float64),
            np.asarray(B, dtype=np.float64),
            degree=self.degree,
            gamma=self.gamma,
            coef0=self.coef0,
        )


class RBFKernel(Kernel):
    """Gaussian radial basis function kernel ``exp(-gamma * ||a - b||^2)``."""

    def __init__(self, gamma: float = 1.0):
        self.gamma = gamma

    def apply_matrix(self, A, B):
        return rbf_kernel(np.asarray(A, dtype=np.float64), np.asarray(B, dtype=np.float64), gamma=self.gamma)


_KERNELS = {
    KernelType.LINEAR: LinearKernel,
    KernelType.POLY: PolyKernel,
    KernelType.RBF: RBFKernel,
}


def create_kernel(kernel, **params) -> Kernel:
    """Build a kernel from a :class:`KernelType` (or its string value).

    Examples
    --------
    >>> create_kernel("rbf", gamma=0.5)
    RBFKernel(gamma=0.5)
    """
    if isinstance(kernel, Kernel):
        return kernel.set_params(**params) if params else kernel
    try:
        kernel_type = kernel if isinstance(kernel, KernelType) else KernelType(str(kernel).lower())
    except ValueError:
        valid = ", ".join(repr(member.value) for member in KernelType)
        raise ValueError(f"kernel must be one of {valid}, got {kernel!r}") from None
    return _KERNELS[kernel_type](**params)
