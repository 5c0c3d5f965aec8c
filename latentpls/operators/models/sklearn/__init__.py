"""Scikit-learn compatible PLS models.

:class:`PLSModel` is the estimator; the algorithm variants plug into it.
"""

from .base import Algorithm, FittedModel, PLSModel
from .kernel_pls import KernelPLS
from .opls import OPLS
from .pls1 import PLS1
from .simpls import SIMPLS

__all__ = [
    "Algorithm",
    "FittedModel",
    "PLSModel",
    "PLS1",
    "SIMPLS",
    "KernelPLS",
    "OPLS",
]
