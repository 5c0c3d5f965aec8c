"""
Pytest configuration for latentpls tests.

Provides shared regression data and makes sure no test leaks logging
handlers into the next one.
"""

import numpy as np
import pytest

from latentpls.core.logging import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    """Remove handlers installed by configure_logging after every test."""
    yield
    reset_logging()


@pytest.fixture
def linear_data():
    """Columns 1..10, 10..1 and a constant column, with y = 2*col1 - col2."""
    col1 = np.arange(1.0, 11.0)
    col2 = col1[::-1].copy()
    X = np.column_stack([col1, col2, np.ones(10)])
    y = 2.0 * col1 - col2
    return X, y


@pytest.fixture
def regression_data():
    """Well-conditioned random single-response regression problem."""
    rng = np.random.default_rng(42)
    X = rng.normal(size=(40, 8))
    beta = rng.normal(size=8)
    y = X @ beta + 0.1 * rng.normal(size=40) + 3.0
    return X, y


@pytest.fixture
def multi_response_data():
    """Random two-response regression problem."""
    rng = np.random.default_rng(7)
    X = rng.normal(size=(30, 5))
    Y = np.column_stack([
        X[:, 0] + 0.5 * X[:, 1],
        np.sin(X[:, 2]) + 0.1 * rng.normal(size=30),
    ])
    return X, Y
