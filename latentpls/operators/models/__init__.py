"""PLS model operators."""

from .sklearn import OPLS, PLS1, SIMPLS, Algorithm, FittedModel, KernelPLS, PLSModel

__all__ = [
    "Algorithm",
    "FittedModel",
    "PLSModel",
    "PLS1",
    "SIMPLS",
    "KernelPLS",
    "OPLS",
]
