"""ARIMA(p, d, q) fitted by ordinary least squares on lag features.

Model (after differencing d times, y' denotes the differenced series):

    y'_t = c + phi_1*y'_{t-1} + ... + phi_p*y'_{t-p}
             + theta_1*e_{t-1} + ... + theta_q*e_{t-q} + e_t

The error terms e_t are not observed, so the MA branch uses a proxy: a pure
AR(p) sub-model is fitted on the differenced series and its residuals stand
in for e_t (with e_0 set to 0, as there is no error before the first
observation). Both branches become ordinary regressors:

    AR features: lag-p window of y'   (left-padded with p zeros)
    MA features: lag-q window of e    (left-padded with q zeros)

and the coefficients [c, phi, theta] are estimated in one OLS fit.

Forecasting is recursive: each new step is predicted from the last p values
of the working sequence (history followed by earlier forecasts) while the MA
inputs are set to 0, the expectation of future errors. Beyond q steps the MA
terms no longer carry information, so long horizons converge to the AR-only,
mean-reverting trajectory.

Thread safety:
    Instances are single-owner. ``fit`` replaces the fitted parameters and
    the sub-model; ``predict`` and ``forecast`` only read model state and
    return residuals to the caller instead of storing them.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

import numpy as np

from src.data.preprocessing import (
    as_series,
    difference,
    lag_view,
    left_pad,
    undo_difference,
)
from src.models.linear import OLSLinearModel
from src.utils.exceptions import NoFeaturesError, NotFittedError

logger = logging.getLogger(__name__)


class Prediction(NamedTuple):
    """In-sample prediction and its residuals.

    Attributes:
        output: Predictions on the original (undifferenced) scale.
        resid: ``target - prediction`` on the differenced scale.
    """
    output: np.ndarray
    resid: np.ndarray


class ARIMAModel:
    """ARIMA(p, d, q) estimated by least squares.

    Args:
        p: AR order (number of lagged values).
        d: Differencing order.
        q: MA order (number of lagged residuals).
        solver: OLS solver, "normal" or "pinv".
    """

    def __init__(self, p: int = 1, d: int = 0, q: int = 0, solver: str = "normal") -> None:
        for name, value in (("p", p), ("d", d), ("q", q)):
            if int(value) != value or value < 0:
                raise ValueError(f"Order {name} must be a non-negative integer, got {value}")
        self.p = int(p)
        self.d = int(d)
        self.q = int(q)
        self.solver = solver

        self.model = OLSLinearModel(fit_intercept=True, solver=solver)
        self.ar: ARIMAModel | None = None
        self.resid_: np.ndarray | None = None
        self.build()

    def __repr__(self) -> str:
        return f"ARIMAModel(p={self.p}, d={self.d}, q={self.q})"

    @classmethod
    def from_config(cls, config: dict) -> ARIMAModel:
        """Build from a merged config with ``model.order = [p, d, q]``."""
        model_cfg = config["model"]
        p, d, q = model_cfg.get("order", [1, 0, 0])
        return cls(p=p, d=d, q=q, solver=model_cfg.get("solver", "normal"))

    def build(self) -> ARIMAModel:
        """Create the residual-proxy sub-model required by the MA branch.

        The sub-model is a pure AR model of order p on the already
        differenced series (order 1 when p == 0, since an AR(0) proxy
        would have no regressors).
        """
        if self.q > 0:
            self.ar = ARIMAModel(p=max(self.p, 1), d=0, q=0, solver=self.solver)
        else:
            self.ar = None
        return self

    @property
    def is_fitted(self) -> bool:
        return self.model.is_fitted

    # ------------------------------------------------------------------
    #  Features
    # ------------------------------------------------------------------

    def _check_orders(self) -> None:
        if self.p == 0 and self.q == 0:
            raise NoFeaturesError(
                "ARIMA(0, d, 0) has no AR or MA regressors; use p > 0 or q > 0."
            )

    def _features(self, x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Build the design matrix from an already differenced series."""
        self._check_orders()

        ar_features = None
        ma_features = None

        if self.q > 0:
            if self.ar is None or not self.ar.is_fitted:
                raise NotFittedError("Model not fitted. Call fit() first.")
            eps = self.ar.predict(x).resid.copy()
            eps[0] = 0.0
            ma_features, _ = lag_view(left_pad(eps, self.q), self.q)

        if self.p > 0:
            ar_features, _ = lag_view(left_pad(x, self.p), self.p)

        if ar_features is not None and ma_features is not None:
            n = min(len(ar_features), len(ma_features))
            features = np.hstack((ar_features[:n], ma_features[:n]))
        elif ma_features is not None:
            n = len(ma_features)
            features = ma_features
        else:
            n = len(ar_features)
            features = ar_features

        return features, x[:n]

    def prepare_features(self, x) -> tuple[np.ndarray, np.ndarray]:
        """Difference ``x`` and build (features, target).

        Returns:
            features: Array of shape (n, p + q), AR columns first.
            target: Differenced series truncated to n values.

        Raises:
            NoFeaturesError: If p == q == 0.
            NotFittedError: If q > 0 and the model has not been fitted.
        """
        x = difference(x, self.d)
        return self._features(x)

    def return_output(self, y: np.ndarray) -> np.ndarray:
        """Map predictions back to the original scale."""
        if self.d > 0:
            return undo_difference(y, self.d)
        return y

    # ------------------------------------------------------------------
    #  Fit / predict
    # ------------------------------------------------------------------

    def fit(self, x) -> np.ndarray:
        """Estimate the AR, MA and intercept coefficients.

        Args:
            x: Observed series (original scale).

        Returns:
            The feature matrix used for fitting.
        """
        self._check_orders()
        series = as_series(x)
        x_diff = difference(series, self.d)

        if self.ar is not None:
            self.ar.fit(x_diff)

        features, target = self._features(x_diff)
        self.model.fit(features, target)
        self.resid_ = target - self.model.predict(features)

        logger.info(
            f"Fitted {self} on {len(series)} samples: "
            f"intercept={self.model.intercept_:.4f}, "
            f"resid_std={np.std(self.resid_):.4f}"
        )
        return features

    def predict(self, x, prepared: np.ndarray | None = None) -> Prediction:
        """Produce in-sample one-step-ahead predictions for ``x``.

        Args:
            x: Observed series (original scale).
            prepared: Feature matrix from ``prepare_features``/``fit`` for the
                same ``x``; skips recomputing it.

        Returns:
            Prediction(output, resid). ``output`` is on the original scale,
            ``resid`` on the differenced scale.
        """
        if not self.is_fitted:
            raise NotFittedError("Model not fitted. Call fit() first.")

        if prepared is None:
            features, target = self.prepare_features(x)
        else:
            features = np.asarray(prepared, dtype=np.float64)
            target = difference(x, self.d)
            if len(features) != len(target):
                raise ValueError(
                    f"Prepared features have {len(features)} rows but the series "
                    f"has {len(target)} values"
                )

        y = self.model.predict(features)
        return Prediction(output=self.return_output(y), resid=target - y)

    def fit_predict(self, x) -> Prediction:
        features = self.fit(x)
        return self.predict(x, prepared=features)

    def forecast(self, x, n: int) -> np.ndarray:
        """Predict the history of ``x`` and ``n`` steps beyond it.

        Args:
            x: Observed series (original scale).
            n: Forecast horizon in steps.

        Returns:
            Array of length ``len(x) + n``: in-sample predictions followed by
            the recursive forecasts, on the original scale. The forecasts are
            integrated from the observed series, so they continue from
            ``x[-1]`` for any ``d``.
        """
        if not self.is_fitted:
            raise NotFittedError("Model not fitted. Call fit() first.")
        if n < 0:
            raise ValueError(f"Forecast horizon must be >= 0, got {n}")

        features, target = self.prepare_features(x)
        y = self.model.predict(features)

        # Working sequence on the differenced scale: observations, then forecasts
        history = np.r_[target, np.zeros(n)]
        forecasts = np.zeros(n)
        n_obs = len(target)

        for i in range(n):
            end = n_obs + i
            ar_part = history[max(end - self.p, 0):end] if self.p > 0 else np.empty(0)
            if len(ar_part) < self.p:
                ar_part = left_pad(ar_part, self.p - len(ar_part))
            row = np.r_[ar_part, np.zeros(self.q)]
            forecasts[i] = self.model.predict(row[None, :])[0]
            history[end] = forecasts[i]

        # Integrate forecasts from the observed history so they continue from x[-1]
        future = undo_difference(np.r_[target, forecasts], self.d)[n_obs:]

        logger.debug(f"{self} forecast {n} steps from {n_obs} observations")
        return np.r_[self.return_output(y), future]

    # ------------------------------------------------------------------
    #  Diagnostics
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """Return orders, coefficients and residual variance as a dict.

        Lag windows are stored oldest value first, so the fitted columns are
        reversed to report [phi_1, ..., phi_p] and [theta_1, ..., theta_q].
        """
        if not self.is_fitted:
            raise NotFittedError("Model not fitted. Call fit() first.")
        coef = self.model.coef_
        return {
            "order": [self.p, self.d, self.q],
            "intercept": float(self.model.intercept_),
            "ar": coef[:self.p][::-1].tolist(),
            "ma": coef[self.p:self.p + self.q][::-1].tolist(),
            "sigma2": float(np.var(self.resid_)),
            "n_obs": int(len(self.resid_)),
        }
