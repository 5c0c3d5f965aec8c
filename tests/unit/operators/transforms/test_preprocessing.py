"""Unit tests for the column-wise preprocessing transforms."""

import numpy as np
import pytest
from sklearn.exceptions import NotFittedError

from latentpls.operators.transforms import (
    Center,
    NoTransform,
    PreprocessingType,
    Standardize,
    create_transform,
)


@pytest.fixture
def matrix():
    rng = np.random.default_rng(0)
    X = rng.normal(loc=3.0, scale=2.0, size=(20, 4))
    X[:, 2] = 7.0  # constant column
    return X


class TestPreprocessingType:
    """Parsing of preprocessing names."""

    @pytest.mark.parametrize("value", ["center", "CENTER", PreprocessingType.CENTER])
    def test_parse(self, value):
        assert PreprocessingType.parse(value) is PreprocessingType.CENTER

    def test_parse_invalid(self):
        with pytest.raises(ValueError, match="preprocessing must be one of"):
            PreprocessingType.parse("scale")

    def test_create_transform(self):
        assert isinstance(create_transform("none"), NoTransform)
        assert isinstance(create_transform(PreprocessingType.STANDARDIZE), Standardize)


class TestTransforms:
    """Test suite for NoTransform, Center and Standardize."""

    @pytest.mark.parametrize("cls", [NoTransform, Center, Standardize])
    def test_round_trip(self, matrix, cls):
        """inverse_transform(transform(X)) recovers X."""
        transform = cls().fit(matrix)

        np.testing.assert_allclose(transform.inverse_transform(transform.transform(matrix)), matrix, atol=1e-8)

    @pytest.mark.parametrize("cls", [NoTransform, Center, Standardize])
    def test_not_configured(self, matrix, cls):
        with pytest.raises(NotFittedError):
            cls().transform(matrix)

    def test_no_transform_is_identity(self, matrix):
        np.testing.assert_array_equal(NoTransform().fit(matrix).transform(matrix), matrix)

    def test_center(self, matrix):
        transformed = Center().fit(matrix).transform(matrix)

        np.testing.assert_allclose(transformed.mean(axis=0), np.zeros(4), atol=1e-12)
        np.testing.assert_allclose(transformed.std(axis=0), matrix.std(axis=0))

    def test_standardize(self, matrix):
        """Columns get zero mean and unit sample standard deviation."""
        transform = Standardize().fit(matrix)
        transformed = transform.transform(matrix)

        np.testing.assert_allclose(transformed.mean(axis=0), np.zeros(4), atol=1e-12)
        np.testing.assert_allclose(transformed[:, [0, 1, 3]].std(axis=0, ddof=1), np.ones(3))

    def test_standardize_constant_column(self, matrix):
        """A zero-variance column keeps a unit scale."""
        transform = Standardize().fit(matrix)

        assert transform.scale_[2] == 1.0
        np.testing.assert_array_equal(transform.transform(matrix)[:, 2], np.zeros(20))

    def test_standardize_small_scale(self, matrix):
        """Tiny but non-constant columns are scaled, not treated as constant."""
        transform = Standardize().fit(matrix * 1e-12)

        np.testing.assert_allclose(transform.scale_[[0, 1, 3]], Standardize().fit(matrix).scale_[[0, 1, 3]] * 1e-12)
        assert transform.scale_[2] == 1.0

    def test_standardize_single_row(self):
        transform = Standardize().fit(np.array([[1.0, 2.0]]))

        np.testing.assert_array_equal(transform.scale_, [1.0, 1.0])

    def test_statistics_are_frozen(self, matrix):
        """New data is transformed with the reference statistics."""
        transform = Center().fit(matrix)

        shifted = transform.transform(matrix + 5.0)

        np.testing.assert_allclose(shifted, transform.transform(matrix) + 5.0)

    def test_configure_alias(self, matrix):
        transform = Standardize()

        assert transform.configure(matrix) is transform
        np.testing.assert_allclose(transform.mean_, matrix.mean(axis=0))

    def test_refit_replaces_statistics(self, matrix):
        transform = Center().fit(matrix)
        transform.fit(matrix[:, :2])

        assert transform.n_features_in_ == 2

    def test_feature_mismatch(self, matrix):
        transform = Center().fit(matrix)

        with pytest.raises(ValueError, match="configured with 4 features"):
            transform.transform(matrix[:, :3])

    def test_does_not_modify_input(self, matrix):
        original = matrix.copy()
        Standardize().fit(matrix).transform(matrix)

        np.testing.assert_array_equal(matrix, original)

    def test_sparse_rejected(self, matrix):
        scipy_sparse = pytest.importorskip("scipy.sparse")

        with pytest.raises(TypeError):
            Center().fit(scipy_sparse.csr_matrix(matrix))
