"""Reversible column-wise preprocessing for predictors and responses.

Classes:
    NoTransform: identity.
    Center: subtracts the per-column training mean.
    Standardize: subtracts the mean and divides by the per-column sample
        standard deviation.

Statistics are learned once by ``fit`` (alias ``configure``) and then
frozen: ``transform`` and ``inverse_transform`` never look at the
statistics of their argument.
"""

from enum import Enum

import numpy as np
import scipy.sparse
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils import check_array
from sklearn.utils.validation import FLOAT_DTYPES, check_is_fitted

from latentpls.utils.linalg import ZERO_NORM


class PreprocessingType(str, Enum):
    """Preprocessing applied to predictors and response before fitting."""

    NONE = "none"
    CENTER = "center"
    STANDARDIZE = "standardize"

    @classmethod
    def parse(cls, value):
        """Accept an enum member or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(repr(member.value) for member in cls)
            raise ValueError(f"preprocessing must be one of {valid}, got {value!r}") from None


class _ColumnTransform(TransformerMixin, BaseEstimator):
    """Shared fit/transform plumbing for the column-wise transforms."""

    def __init__(self, *, copy: bool = True):
        self.copy = copy

    def _reset(self):
        for attr in ("mean_", "scale_", "n_features_in_"):
            if hasattr(self, attr):
                delattr(self, attr)

    def _statistics(self, X):
        raise NotImplementedError

    def fit(self, X, y=None):
        """Learn the per-column statistics from the reference matrix ``X``."""
        self._reset()
        if scipy.sparse.issparse(X):
            raise TypeError(f"{type(self).__name__} does not support scipy.sparse input")
        X = check_array(X, dtype=FLOAT_DTYPES, ensure_min_samples=1)
        mean, scale = self._statistics(X)
        self.mean_ = mean
        self.scale_ = scale
        self.n_features_in_ = X.shape[1]
        return self

    def configure(self, X):
        """Alias of :meth:`fit`, kept for the configure/transform vocabulary."""
        return self.fit(X)

    def _check(self, X):
        check_is_fitted(self, ["mean_", "scale_"])
        X = check_array(X, copy=self.copy, dtype=FLOAT_DTYPES, ensure_min_samples=0)
        if X.shape[1] != self.n_features_in_:
            raise ValueError(
                f"X has {X.shape[1]} features, but {type(self).__name__} was configured with "
                f"{self.n_features_in_} features"
            )
        return X

    def transform(self, X):
        X = self._check(X)
        return (X - self.mean_) / self.scale_

    def inverse_transform(self, X):
        X = self._check(X)
        return X * self.scale_ + self.mean_


class NoTransform(_ColumnTransform):
    """Identity transform (zero mean, unit scale)."""

    def _statistics(self, X):
        n_features = X.shape[1]
        return np.zeros(n_features), np.ones(n_features)


class Center(_ColumnTransform):
    """Subtract the per-column mean learned at configuration time."""

    def _statistics(self, X):
        return X.mean(axis=0), np.ones(X.shape[1])


class Standardize(_ColumnTransform):
    """Center and divide by the per-column sample standard deviation.

    Columns with zero variance keep a scale of 1.0 so the transform stays
    invertible.
    """

    def _statistics(self, X):
        mean = X.mean(axis=0)
        if X.shape[0] > 1:
            scale = X.std(axis=0, ddof=1)
        else:
            scale = np.ones(X.shape[1])
        # Zero variance relative to the column magnitude
        scale = np.where(scale <= ZERO_NORM * np.abs(X).max(axis=0), 1.0, scale)
        return mean, scale


_TRANSFORMS = {
    PreprocessingType.NONE: NoTransform,
    PreprocessingType.CENTER: Center,
    PreprocessingType.STANDARDIZE: Standardize,
}


def create_transform(preprocessing_type) -> _ColumnTransform:
    """Return a fresh, unconfigured transform for ``preprocessing_type``."""
    return _TRANSFORMS[PreprocessingType.parse(preprocessing_type)]()
