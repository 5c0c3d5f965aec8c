"""Unit tests for OPLS."""

import numpy as np
import pytest

from latentpls.core.exceptions import NumericalError, ValidationError
from latentpls.operators.models.sklearn import OPLS, PLS1, SIMPLS, PLSModel


class TestOPLS:
    """Test suite for orthogonal signal filtering plus base model."""

    def test_shapes(self, regression_data):
        """Orthogonal matrices have one column per removed component."""
        X, y = regression_data
        model = PLSModel(OPLS(), n_components=2).fit(X, y)

        assert model.get_matrix("P_orth").shape == (8, 2)
        assert model.get_matrix("W_orth").shape == (8, 2)
        assert model.get_matrix("T_orth").shape == (40, 2)
        assert model.get_matrix("X_osc").shape == (40, 8)
        assert model.transform(X).shape == (40, 8)
        assert model.predict(X).shape == (40,)

    def test_orthogonal_weights(self, regression_data):
        """Orthogonal weights are unit vectors orthogonal to the initial weight."""
        X, y = regression_data
        model = PLSModel(OPLS(), n_components=3).fit(X, y)

        Xc = X - X.mean(axis=0)
        yc = y - y.mean()
        w0 = Xc.T @ yc
        w0 /= np.linalg.norm(w0)

        W_orth = model.get_matrix("W_orth")
        np.testing.assert_allclose(np.linalg.norm(W_orth, axis=0), np.ones(3), atol=1e-10)
        np.testing.assert_allclose(W_orth.T @ w0, np.zeros(3), atol=1e-10)

    def test_first_orthogonal_score_uncorrelated_with_response(self, regression_data):
        X, y = regression_data
        model = PLSModel(OPLS(), n_components=1).fit(X, y)

        t_orth = model.get_matrix("T_orth")[:, 0]
        assert abs(t_orth @ (y - y.mean())) < 1e-8 * np.linalg.norm(t_orth) * np.linalg.norm(y)

    def test_single_component_filter_matches_deflation(self, regression_data):
        """With one component, filtering new data equals the training deflation."""
        X, y = regression_data
        model = PLSModel(OPLS(), n_components=1).fit(X, y)

        np.testing.assert_allclose(model.transform(X), model.get_matrix("X_osc"), atol=1e-10)

    def test_matches_two_component_pls(self, regression_data):
        """One orthogonal plus one predictive component predicts like a 2-component PLS."""
        X, y = regression_data
        opls = PLSModel(OPLS(), n_components=1).fit(X, y)
        pls = PLSModel(PLS1(), n_components=2).fit(X, y)

        X_test = np.random.default_rng(11).normal(size=(6, 8))
        np.testing.assert_allclose(opls.predict(X), pls.predict(X), rtol=1e-6, atol=1e-8)
        np.testing.assert_allclose(opls.predict(X_test), pls.predict(X_test), rtol=1e-6, atol=1e-8)

    def test_loadings_are_p_orth(self, regression_data):
        X, y = regression_data
        model = PLSModel(OPLS(), n_components=2).fit(X, y)

        np.testing.assert_array_equal(model.get_loadings(), model.get_matrix("P_orth"))


class TestOPLSBase:
    """The internally owned base model."""

    def test_default_base(self, regression_data):
        """Without a base a one-component PLS1 is used."""
        X, y = regression_data
        model = PLSModel(OPLS(), n_components=2).fit(X, y)

        base = model.state_.algorithm_state.base
        assert isinstance(base, PLSModel)
        assert isinstance(base.algorithm_, PLS1)
        assert base.n_components == 1

    def test_custom_base_is_cloned(self, regression_data):
        """A SIMPLS base works and the template stays unfitted."""
        X, y = regression_data
        template = PLSModel(SIMPLS(), n_components=2)
        model = PLSModel(OPLS(base=template), n_components=1).fit(X, y)

        assert not hasattr(template, "state_")
        assert isinstance(model.state_.algorithm_state.base.algorithm_, SIMPLS)
        assert model.predict(X).shape == (40,)

    def test_invalid_base_rejected(self, regression_data):
        X, y = regression_data

        with pytest.raises(ValidationError, match="base must be a PLSModel"):
            PLSModel(OPLS(base=PLS1()), n_components=1).fit(X, y)


class TestOPLSValidation:
    """Validation and degenerate input."""

    def test_two_column_response_rejected(self, multi_response_data):
        X, Y = multi_response_data

        with pytest.raises(ValidationError, match="found: 2"):
            PLSModel(OPLS(), n_components=1).fit(X, Y)

    def test_constant_response_raises(self, regression_data):
        X, _ = regression_data

        with pytest.raises(NumericalError):
            PLSModel(OPLS(), n_components=1).fit(X, np.ones(len(X)))
