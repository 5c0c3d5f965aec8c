"""Column-wise preprocessing transforms."""

from .preprocessing import Center, NoTransform, PreprocessingType, Standardize, create_transform

__all__ = [
    "PreprocessingType",
    "NoTransform",
    "Center",
    "Standardize",
    "create_transform",
]
