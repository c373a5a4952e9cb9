"""Tests for src/models/linear.py — OLS via the normal equations."""

import numpy as np
import pytest

from src.models.linear import OLSLinearModel
from src.utils.exceptions import NotFittedError, SingularMatrixError


class TestOLSLinearModel:
    """Tests for fitting, prediction and failure modes."""

    def test_recovers_line(self):
        """y = 2x + 3 should give coef_ = [2] and intercept_ = 3."""
        x = np.arange(10.0)[:, None]
        y = 2 * x.ravel() + 3
        model = OLSLinearModel(fit_intercept=True).fit(x, y)
        np.testing.assert_allclose(model.coef_, [2.0], atol=1e-9)
        assert model.intercept_ == pytest.approx(3.0)

    def test_no_intercept(self):
        """Without intercept, beta_ should equal coef_ and pass through 0."""
        rng = np.random.default_rng(0)
        X = rng.normal(size=(50, 2))
        y = X @ np.array([1.5, -0.5])
        model = OLSLinearModel(fit_intercept=False).fit(X, y)
        np.testing.assert_allclose(model.coef_, [1.5, -0.5], atol=1e-9)
        np.testing.assert_array_equal(model.beta_, model.coef_)
        assert model.intercept_ == 0.0

    def test_matches_lstsq(self):
        """Coefficients should agree with numpy's least-squares solver."""
        rng = np.random.default_rng(1)
        X = rng.normal(size=(100, 3))
        y = X @ np.array([0.3, -1.0, 2.0]) + 0.5 + rng.normal(0, 0.1, 100)
        model = OLSLinearModel().fit(X, y)
        design = np.hstack((np.ones((100, 1)), X))
        expected = np.linalg.lstsq(design, y, rcond=None)[0]
        np.testing.assert_allclose(model.beta_, expected, atol=1e-8)

    def test_fit_predict(self):
        x = np.arange(5.0)[:, None]
        y = -x.ravel() + 1
        np.testing.assert_allclose(OLSLinearModel().fit_predict(x, y), y, atol=1e-9)

    def test_accepts_1d_features(self):
        """A 1-D feature array should be treated as a single column."""
        x = np.arange(6.0)
        model = OLSLinearModel().fit(x, 4 * x)
        np.testing.assert_allclose(model.predict(np.array([10.0])), [40.0], atol=1e-8)

    def test_predict_before_fit(self):
        with pytest.raises(NotFittedError, match="not fitted"):
            OLSLinearModel().predict(np.ones((2, 1)))

    def test_not_fitted_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            OLSLinearModel().predict(np.ones((2, 1)))

    def test_singular_matrix_raises(self):
        """Duplicated columns make X'X singular."""
        x = np.arange(10.0)
        X = np.column_stack([x, x])
        with pytest.raises(SingularMatrixError, match="singular"):
            OLSLinearModel().fit(X, x)

    def test_singular_is_linalg_error(self):
        X = np.ones((5, 1))
        with pytest.raises(np.linalg.LinAlgError):
            OLSLinearModel(fit_intercept=True).fit(X, np.arange(5.0))

    def test_pinv_handles_collinear(self):
        """The pseudo-inverse solver should still fit collinear features."""
        x = np.arange(10.0)
        X = np.column_stack([x, x])
        y = 3 * x + 1
        model = OLSLinearModel(solver="pinv").fit(X, y)
        np.testing.assert_allclose(model.predict(X), y, atol=1e-8)
        np.testing.assert_allclose(model.coef_, [1.5, 1.5], atol=1e-8)

    def test_unknown_solver(self):
        with pytest.raises(ValueError, match="Unknown solver"):
            OLSLinearModel(solver="qr")

    def test_row_mismatch(self):
        with pytest.raises(ValueError, match="rows"):
            OLSLinearModel().fit(np.ones((3, 1)), np.ones(4))

    def test_predict_column_mismatch(self):
        rng = np.random.default_rng(2)
        model = OLSLinearModel().fit(rng.normal(size=(10, 2)), rng.normal(size=10))
        with pytest.raises(ValueError, match="columns"):
            model.predict(np.ones((2, 3)))
