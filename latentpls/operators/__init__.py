"""Operators: kernels, preprocessing transforms and PLS models."""

from .kernels import Kernel, KernelType, LinearKernel, PolyKernel, RBFKernel, create_kernel
from .models import OPLS, PLS1, SIMPLS, KernelPLS, PLSModel
from .transforms import Center, NoTransform, PreprocessingType, Standardize, create_transform

__all__ = [
    # Kernels
    "Kernel",
    "KernelType",
    "LinearKernel",
    "PolyKernel",
    "RBFKernel",
    "create_kernel",
    # Models
    "PLSModel",
    "PLS1",
    "SIMPLS",
    "KernelPLS",
    "OPLS",
    # Transforms
    "PreprocessingType",
    "NoTransform",
    "Center",
    "Standardize",
    "create_transform",
]
