"""
latentpls - Partial Least Squares regression models.

Provides NIPALS PLS1, SIMPLS, Kernel PLS and OPLS behind a single
scikit-learn compatible estimator, together with the column-wise
preprocessing and kernel functions they depend on.
"""

__version__ = "0.3.0"
__author__ = "latentpls Project"

from .core.exceptions import NumericalError, PLSError, ValidationError
from .operators.kernels import LinearKernel, PolyKernel, RBFKernel, create_kernel
from .operators.models.sklearn import OPLS, PLS1, SIMPLS, KernelPLS, PLSModel
from .operators.transforms.preprocessing import Center, NoTransform, PreprocessingType, Standardize
from .config import ModelConfig, build_model, load_config

__all__ = [
    # Models
    "PLSModel",
    "PLS1",
    "SIMPLS",
    "KernelPLS",
    "OPLS",

    # Kernels
    "LinearKernel",
    "PolyKernel",
    "RBFKernel",
    "create_kernel",

    # Preprocessing
    "PreprocessingType",
    "NoTransform",
    "Center",
    "Standardize",

    # Configuration
    "ModelConfig",
    "build_model",
    "load_config",

    # Errors
    "PLSError",
    "ValidationError",
    "NumericalError",
]
