"""Ordinary least squares regression via the normal equations.

For a design matrix X (n, k) and target y (n,), OLS minimises ||y - X·β||²
with the closed-form solution

    β = (XᵀX)⁻¹ Xᵀ y

When ``fit_intercept`` is set, a column of ones is prepended to X so that
β[0] is the intercept and β[1:] are the slope coefficients.

Two solvers are available:
    "normal": solve the normal equations directly. Rank-deficient XᵀX
              raises SingularMatrixError.
    "pinv":   β = pinv(X) y, the minimum-norm least-squares solution, which
              is defined for collinear or constant regressors as well.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import numpy as np

from src.utils.exceptions import NotFittedError, SingularMatrixError

logger = logging.getLogger(__name__)

SOLVERS = ("normal", "pinv")


class Regressor(Protocol):
    """Fit/predict contract shared by plain regressors and time series models.

    The data comes first. Supervised models also take the target ``y``,
    time series models take only the series. ``fit_predict`` must return
    what ``predict`` returns after ``fit`` on the same data.
    """

    def fit(self, X: np.ndarray, /, *args: Any) -> Any: ...

    def predict(self, X: np.ndarray, /) -> Any: ...

    def fit_predict(self, X: np.ndarray, /, *args: Any) -> Any: ...


class OLSLinearModel:
    """Linear regression fitted by ordinary least squares.

    Args:
        fit_intercept: Prepend a constant column to the features.
        solver: "normal" (fail on singular XᵀX) or "pinv".
    """

    def __init__(self, fit_intercept: bool = True, solver: str = "normal") -> None:
        if solver not in SOLVERS:
            raise ValueError(
                f"Unknown solver '{solver}'. Supported: {list(SOLVERS)}"
            )
        self.fit_intercept = fit_intercept
        self.solver = solver
        self.beta_: np.ndarray | None = None
        self.intercept_: float = 0.0
        self.coef_: np.ndarray | None = None

    @property
    def is_fitted(self) -> bool:
        return self.beta_ is not None

    def _design_matrix(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X[:, None]
        if X.ndim != 2:
            raise ValueError(f"Expected a 2-D feature matrix, got shape {X.shape}")
        if self.fit_intercept:
            X = np.hstack((np.ones((X.shape[0], 1)), X))
        return X

    def _solve(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        if self.solver == "pinv":
            return np.linalg.pinv(X) @ y

        gram = X.T @ X
        rank = np.linalg.matrix_rank(gram)
        if rank < gram.shape[0]:
            raise SingularMatrixError(
                f"X'X is singular (rank {rank} < {gram.shape[0]}). "
                f"Remove collinear features or use solver='pinv'."
            )
        try:
            return np.linalg.solve(gram, X.T @ y)
        except np.linalg.LinAlgError as exc:
            raise SingularMatrixError(f"Could not solve normal equations: {exc}") from exc

    def fit(self, X: np.ndarray, y: np.ndarray) -> OLSLinearModel:
        """Estimate β from features X and target y.

        Args:
            X: Feature matrix of shape (n_samples, n_features). A 1-D array
                is treated as a single feature column.
            y: Target vector of shape (n_samples,).

        Returns:
            self

        Raises:
            ValueError: If X and y have different numbers of rows.
            SingularMatrixError: If solver="normal" and XᵀX is singular.
        """
        X = self._design_matrix(X)
        y = np.asarray(y, dtype=np.float64).ravel()
        if X.shape[0] != len(y):
            raise ValueError(
                f"X has {X.shape[0]} rows but y has {len(y)} values"
            )

        self.beta_ = self._solve(X, y)
        if self.fit_intercept:
            self.intercept_ = float(self.beta_[0])
            self.coef_ = self.beta_[1:]
        else:
            self.intercept_ = 0.0
            self.coef_ = self.beta_

        logger.debug(
            f"OLS fit on {X.shape[0]} rows x {X.shape[1]} cols "
            f"(intercept={self.fit_intercept}, solver={self.solver})"
        )
        return self

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Return X·β using the same intercept convention as ``fit``."""
        if self.beta_ is None:
            raise NotFittedError("Model not fitted. Call fit() first.")
        X = self._design_matrix(X)
        if X.shape[1] != len(self.beta_):
            raise ValueError(
                f"Expected {len(self.beta_)} design columns, got {X.shape[1]}"
            )
        return X @ self.beta_

    def fit_predict(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        return self.fit(X, y).predict(X)
