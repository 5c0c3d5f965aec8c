"""Shared train -> transform -> predict contract for the PLS algorithms.

The numerical algorithms (:class:`PLS1`, :class:`SIMPLS`, :class:`KernelPLS`,
:class:`OPLS`) are small *variants*: they only know how to fit an immutable
state from already-preprocessed arrays and how to use that state.
:class:`PLSModel` composes one variant with input validation, the
predictor/response preprocessing and the response rescaling.

Examples
--------
>>> import numpy as np
>>> from latentpls.operators.models.sklearn import PLSModel, SIMPLS
>>> X = np.random.default_rng(0).normal(size=(20, 6))
>>> y = X[:, 0] - 2 * X[:, 3]
>>> model = PLSModel(SIMPLS(), n_components=2, preprocessing="center").fit(X, y)
>>> model.predict(X).shape
(20,)
>>> model.get_matrix_names()
('W', 'P', 'Q', 'B')
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import scipy.sparse
from numpy.typing import ArrayLike, NDArray
from sklearn.base import BaseEstimator, RegressorMixin, TransformerMixin, clone
from sklearn.utils import check_array
from sklearn.utils.validation import check_is_fitted

from latentpls.core.exceptions import ValidationError
from latentpls.core.logging import Status, format_duration, get_logger
from latentpls.operators.transforms.preprocessing import PreprocessingType, create_transform
from latentpls.utils.linalg import as_column

logger = get_logger(__name__)


class Algorithm(BaseEstimator):
    """Capability set implemented by every PLS variant.

    Attributes
    ----------
    matrix_names : tuple of str
        Names accepted by :meth:`PLSModel.get_matrix`, in display order.
        Each name is an attribute of the variant's state object.
    loadings_name : str or None
        Matrix returned by :meth:`PLSModel.get_loadings`.
    supports_prediction : bool
        Whether :meth:`predict_state` is available.
    min_response_columns, max_response_columns : int or None
        Accepted number of response columns (``None`` = unbounded).
    """

    matrix_names: tuple = ()
    loadings_name: Optional[str] = None
    supports_prediction = True
    min_response_columns = 1
    max_response_columns: Optional[int] = 1

    @property
    def multi_response(self) -> bool:
        return self.max_response_columns != 1

    def check(self, X: NDArray, Y: NDArray) -> Optional[str]:
        """Return ``None`` if the data is acceptable, otherwise an error message."""
        n_columns = Y.shape[1]
        if self.max_response_columns == 1 and self.min_response_columns == 1:
            if n_columns != 1:
                return f"Algorithm requires exactly one response variable, found: {n_columns}"
            return None
        if n_columns < self.min_response_columns:
            return f"Algorithm requires at least {self.min_response_columns} response variable(s), found: {n_columns}"
        if self.max_response_columns is not None and n_columns > self.max_response_columns:
            return f"Algorithm supports at most {self.max_response_columns} response variable(s), found: {n_columns}"
        return None

    def fit_state(self, X: NDArray, Y: NDArray, n_components: int) -> Any:
        """Fit on preprocessed ``X`` (n, p) and ``Y`` (n, q); return the fitted state."""
        raise NotImplementedError

    def transform_state(self, state: Any, X: NDArray) -> NDArray:
        """Map preprocessed predictors into the latent representation."""
        raise NotImplementedError

    def predict_state(self, state: Any, X: NDArray) -> NDArray:
        """Raw predictions (preprocessed response scale), shape (n, q)."""
        raise NotImplementedError


@dataclass(frozen=True)
class FittedModel:
    """Everything a fitted :class:`PLSModel` needs to transform and predict.

    Attributes:
        algorithm_state: Immutable state returned by the variant's ``fit_state``.
        x_transform: Configured predictor transform.
        y_transform: Configured response transform.
        y_mean: Response mean used to rescale single-response predictions.
        y_std: Response scale used to rescale single-response predictions.
        n_features: Number of predictor columns seen during fit.
        n_targets: Number of response columns seen during fit.
        y_1d: Whether the response was passed as a 1-D array.
    """

    algorithm_state: Any
    x_transform: Any
    y_transform: Any
    y_mean: float
    y_std: float
    n_features: int
    n_targets: int
    y_1d: bool


class PLSModel(RegressorMixin, TransformerMixin, BaseEstimator):
    """PLS model: validation, preprocessing and rescaling around a variant.

    Parameters
    ----------
    algorithm : Algorithm, default=None
        The numerical variant to use. ``None`` means :class:`PLS1`. The
        instance is cloned at fit time, so one variant object may be shared
        between models as a template.
    n_components : int, default=5
        Number of latent components to extract. Must not exceed
        ``min(n_samples, n_features)``; this is not enforced and
        ill-conditioned fits raise :class:`NumericalError`.
    preprocessing : {'none', 'center', 'standardize'} or PreprocessingType, default='center'
        Column-wise preprocessing applied to predictors and response.

    Attributes
    ----------
    state_ : FittedModel
        Immutable fitted state. Present only after a successful fit.
    algorithm_ : Algorithm
        The variant instance owned by this fit.
    n_features_in_ : int
        Number of features seen during fit.
    """

    def __init__(self, algorithm: Optional[Algorithm] = None, n_components: int = 5, preprocessing="center"):
        self.algorithm = algorithm
        self.n_components = n_components
        self.preprocessing = preprocessing

    def _reset(self):
        """Discard any fitted state."""
        for attr in ("state_", "algorithm_", "n_features_in_"):
            if hasattr(self, attr):
                delattr(self, attr)

    def set_params(self, **params) -> "PLSModel":
        """Set parameters; any change of configuration discards the fit."""
        super().set_params(**params)
        self._reset()
        return self

    def _new_algorithm(self) -> Algorithm:
        if self.algorithm is None:
            from .pls1 import PLS1
            return PLS1()
        if not isinstance(self.algorithm, Algorithm):
            raise ValidationError(f"algorithm must be an Algorithm instance, got {type(self.algorithm).__name__}")
        return clone(self.algorithm)

    def _validate(self, X: ArrayLike, y: ArrayLike):
        """Check configuration and shapes. Raises before any state changes."""
        if isinstance(self.n_components, bool) or not isinstance(self.n_components, (int, np.integer)) or self.n_components < 1:
            raise ValidationError(f"n_components must be a positive integer, got {self.n_components!r}")
        try:
            preprocessing = PreprocessingType.parse(self.preprocessing)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        if scipy.sparse.issparse(X) or scipy.sparse.issparse(y):
            raise ValidationError("Sparse input is not supported")
        try:
            X = check_array(X, dtype=np.float64)
            y = np.asarray(y, dtype=np.float64)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        y_1d = y.ndim == 1
        if y_1d:
            y = as_column(y)
        if y.ndim != 2:
            raise ValidationError(f"Response must be 1-D or 2-D, got {y.ndim}-D")
        if not np.all(np.isfinite(y)):
            raise ValidationError("Response contains NaN or infinity")
        if X.shape[0] != y.shape[0]:
            raise ValidationError(
                f"Predictors and response have different number of rows: {X.shape[0]} != {y.shape[0]}"
            )

        algorithm = self._new_algorithm()
        message = algorithm.check(X, y)
        if message is not None:
            raise ValidationError(message)

        return X, y, y_1d, preprocessing, algorithm

    def fit(self, X: ArrayLike, y: ArrayLike) -> "PLSModel":
        """Validate, preprocess and fit the model.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Predictors.
        y : array-like of shape (n_samples,) or (n_samples, n_targets)
            Response(s).

        Returns
        -------
        self : PLSModel

        Raises
        ------
        ValidationError
            If shapes or configuration are invalid. A previous fit is kept.
        NumericalError
            If the data is degenerate. The model is left unfit.
        """
        X, Y, y_1d, preprocessing, algorithm = self._validate(X, y)
        self._reset()

        n_samples, n_features = X.shape
        if self.n_components > min(n_samples, n_features):
            logger.warning(
                "n_components=%d exceeds min(n_samples, n_features)=%d; the fit may be ill-conditioned",
                self.n_components, min(n_samples, n_features),
            )

        x_transform = create_transform(preprocessing).fit(X)
        y_transform = create_transform(preprocessing).fit(Y)
        X_pre = x_transform.transform(X)
        Y_pre = y_transform.transform(Y)

        # Scalar rescaling for single-response predictions
        y_mean = float(y_transform.mean_[0])
        y_std = float(y_transform.scale_[0])

        start = time.perf_counter()
        logger.debug(
            "Fitting %s with %d component(s) on %dx%d predictors (%s)",
            type(algorithm).__name__, self.n_components, n_samples, n_features, preprocessing.value,
        )
        state = algorithm.fit_state(X_pre, Y_pre, int(self.n_components))

        self.algorithm_ = algorithm
        self.state_ = FittedModel(
            algorithm_state=state,
            x_transform=x_transform,
            y_transform=y_transform,
            y_mean=y_mean,
            y_std=y_std,
            n_features=n_features,
            n_targets=Y.shape[1],
            y_1d=y_1d,
        )
        self.n_features_in_ = n_features
        logger.info(
            "Fitted %s (%d components) in %s",
            type(algorithm).__name__, self.n_components, format_duration(time.perf_counter() - start),
            extra={"status": Status.SUCCESS},
        )
        return self

    def initialize(self, X: ArrayLike, y: ArrayLike) -> Optional[str]:
        """Fit, reporting validation problems as a message instead of raising.

        Returns
        -------
        message : str or None
            ``None`` on success, otherwise the validation error message.
            Numerical errors still raise.
        """
        try:
            self.fit(X, y)
        except ValidationError as exc:
            return str(exc)
        return None

    def _preprocess(self, X: ArrayLike) -> NDArray:
        state = self.state_
        X = check_array(X, dtype=np.float64, ensure_min_samples=0)
        if X.shape[1] != state.n_features:
            raise ValueError(f"X has {X.shape[1]} features, but the model was fitted with {state.n_features} features")
        return state.x_transform.transform(X)

    def transform(self, X: ArrayLike) -> NDArray[np.floating]:
        """Map predictors into the model's latent/feature representation.

        Raises
        ------
        NotFittedError
            If the model has not been fitted successfully.
        """
        check_is_fitted(self, "state_")
        return self.algorithm_.transform_state(self.state_.algorithm_state, self._preprocess(X))

    def predict(self, X: ArrayLike) -> NDArray[np.floating]:
        """Predict responses on the original response scale.

        Returns
        -------
        y_pred : ndarray of shape (n_samples,) or (n_samples, n_targets)
            1-D if the model was fitted with a 1-D response.

        Raises
        ------
        NotFittedError
            If the model has not been fitted successfully.
        NotImplementedError
            If the algorithm cannot make predictions.
        """
        check_is_fitted(self, "state_")
        if not self.algorithm_.supports_prediction:
            raise NotImplementedError(f"{type(self.algorithm_).__name__} does not support predictions")

        state = self.state_
        raw = self.algorithm_.predict_state(state.algorithm_state, self._preprocess(X))
        if self.algorithm_.multi_response:
            y_pred = state.y_transform.inverse_transform(raw)
        else:
            y_pred = raw * state.y_std + state.y_mean

        if state.y_1d:
            return y_pred.ravel()
        return y_pred

    def get_matrix_names(self) -> tuple:
        """Names of the matrices available through :meth:`get_matrix`."""
        algorithm = self.algorithm_ if hasattr(self, "algorithm_") else self._new_algorithm()
        return tuple(algorithm.matrix_names)

    def get_matrix(self, name: str) -> Optional[NDArray[np.floating]]:
        """Return the named fitted matrix (read-only), or ``None`` if unknown or unfit."""
        if not hasattr(self, "state_") or name not in self.algorithm_.matrix_names:
            return None
        return getattr(self.state_.algorithm_state, name)

    def has_loadings(self) -> bool:
        algorithm = self.algorithm_ if hasattr(self, "algorithm_") else self._new_algorithm()
        return algorithm.loadings_name is not None

    def get_loadings(self) -> Optional[NDArray[np.floating]]:
        """Return the algorithm's loadings matrix, ``None`` if unavailable."""
        if not hasattr(self, "algorithm_") or self.algorithm_.loadings_name is None:
            return None
        return self.get_matrix(self.algorithm_.loadings_name)
