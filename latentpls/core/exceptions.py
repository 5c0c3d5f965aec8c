"""Exception hierarchy for latentpls.

Validation errors are raised before any numerical work starts. Numerical
errors surface mid-fit (zero-norm vectors, singular matrices) and leave
the model unfit. Calling ``transform``/``predict`` on an unfit model raises
:class:`sklearn.exceptions.NotFittedError`.
"""


class PLSError(Exception):
    """Base exception for latentpls errors."""
    pass


class ValidationError(PLSError, ValueError):
    """Raised when predictors/response do not satisfy an algorithm's requirements."""
    pass


class NumericalError(PLSError, ArithmeticError):
    """Raised when a fit hits a degenerate or singular intermediate result."""
    pass
