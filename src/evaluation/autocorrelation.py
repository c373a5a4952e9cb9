"""Autocorrelation diagnostics: ACF, PACF and Bartlett confidence bands.

ACF at lag k is the Pearson correlation between the series and a copy of
itself shifted by k steps:

    acf[k] = corr(x[:-k], x[k:]),   acf[0] = 1

PACF at lag k is the correlation between x_t and x_{t-k} once the linear
effect of the intermediate values x_{t-1}, ..., x_{t-k+1} has been removed.
Both ends are regressed (no intercept) on the intermediate lags and the
residuals are correlated. This costs one pair of OLS fits per lag, so the
total work grows quadratically with the number of lags.

Bartlett's formula gives the standard error of acf[k] under the hypothesis
that the true autocorrelation vanishes beyond lag k-1:

    se[k] = sqrt((1 + 2 * sum_{i=1}^{k-1} acf[i]^2) / n),   se[0] = 1/sqrt(n)

A two-sided band at level alpha is ±z_{1-alpha/2} * se[k]. For the PACF the
white-noise standard error 1/sqrt(n) is used at every lag.

Zero-variance inputs raise DegenerateInputError rather than producing NaN.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy import stats

from src.data.preprocessing import as_series, lag_view
from src.models.linear import OLSLinearModel
from src.utils.exceptions import DegenerateInputError, InvalidOrderError

logger = logging.getLogger(__name__)


def pearson_correlation(x, y) -> float:
    """Pearson correlation of two equal-length series.

    Raises:
        ValueError: If the lengths differ.
        DegenerateInputError: If either series has zero variance.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if len(x) != len(y):
        raise ValueError(f"Length mismatch: len(x)={len(x)}, len(y)={len(y)}")

    std_x, std_y = x.std(), y.std()
    if std_x == 0 or std_y == 0:
        raise DegenerateInputError(
            "Correlation is undefined for a series with zero variance"
        )
    return float(np.mean((x - x.mean()) * (y - y.mean())) / (std_x * std_y))


def acf(x, lag: int = 40) -> np.ndarray:
    """Sample autocorrelation for lags 0..lag-1.

    Args:
        x: 1-D series.
        lag: Number of coefficients returned (including lag 0).

    Returns:
        Array of shape (lag,) with acf[0] == 1.

    Raises:
        InvalidOrderError: If lag < 1 or lag > len(x) - 1.
    """
    x = as_series(x)
    if lag < 1 or lag >= len(x):
        raise InvalidOrderError(
            f"ACF lag must satisfy 1 <= lag < len(x); got lag={lag}, len(x)={len(x)}"
        )
    values = [1.0] + [pearson_correlation(x[:-k], x[k:]) for k in range(1, lag)]
    return np.array(values)


def bartletts_formula(acf_array, n: int) -> np.ndarray:
    """Standard error of each autocorrelation coefficient.

    Args:
        acf_array: ACF values indexed by lag (index 0 is ignored).
        n: Number of observations the ACF was estimated from.

    Returns:
        Array with the same length as ``acf_array``.
    """
    if n < 1:
        raise ValueError(f"Number of observations must be positive, got {n}")
    acf_array = np.asarray(acf_array, dtype=np.float64)
    if len(acf_array) == 0:
        raise ValueError("acf_array must contain at least the lag-0 value")
    se = np.zeros(len(acf_array))
    se[0] = 1.0 / np.sqrt(n)
    # cumulative[j] = sum of acf[1..j]^2, so se[k] uses cumulative[k-1]
    cumulative = np.r_[0.0, np.cumsum(acf_array[1:-1] ** 2)]
    se[1:] = np.sqrt((1.0 + 2.0 * cumulative[:len(se) - 1]) / n)
    return se


def confidence_band(acf_array, n: int, alpha: float = 0.05) -> np.ndarray:
    """Half-width of the two-sided (1 - alpha) band around zero per lag."""
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")
    z = stats.norm.ppf(1.0 - alpha / 2.0)
    return z * bartletts_formula(acf_array, n)


def pacf(x, lag: int = 40) -> np.ndarray:
    """Sample partial autocorrelation for lags 0..lag.

    Args:
        x: 1-D series.
        lag: Highest lag computed.

    Returns:
        Array of shape (lag + 1,): pacf[0] == 1 and pacf[1] == acf[1].

    Raises:
        InvalidOrderError: If lag < 1 or 2 * lag + 1 > len(x), i.e. the
            widest window of lag + 1 values leaves fewer than lag rows for
            the regression on the intermediate lags.
    """
    x = as_series(x)
    if lag < 1 or len(x) - (lag + 1) < lag:
        raise InvalidOrderError(
            f"PACF lag must satisfy 1 <= lag and 2 * lag + 1 <= len(x); "
            f"got lag={lag}, len(x)={len(x)}"
        )

    values = [1.0, acf(x, 2)[1]]
    for k in range(3, lag + 2):
        # Window [x_{t-k+1}, ..., x_t]: first column is k-1 steps back
        window, _ = lag_view(x, k)
        current = window[:, -1]
        lagged = window[:, 0]
        intermediate = window[:, 1:-1]

        current_hat = OLSLinearModel(fit_intercept=False).fit_predict(intermediate, current)
        lagged_hat = OLSLinearModel(fit_intercept=False).fit_predict(intermediate, lagged)

        values.append(pearson_correlation(current - current_hat, lagged - lagged_hat))

    return np.array(values)


def ljung_box(resid, lags: int = 10, model_df: int = 0) -> tuple[float, float]:
    """Ljung-Box portmanteau test for remaining autocorrelation.

        Q = n(n+2) * sum_{k=1}^{h} acf[k]^2 / (n - k)  ~  chi2(h - model_df)

    Args:
        resid: Model residuals.
        lags: Number of lags h included in the statistic.
        model_df: Fitted ARMA parameters (p + q) subtracted from the
            degrees of freedom.

    Returns:
        Tuple of (Q statistic, p-value). A small p-value means the residuals
        are not white noise.
    """
    resid = as_series(resid)
    n = len(resid)
    dof = lags - model_df
    if dof < 1:
        raise ValueError(f"lags ({lags}) must exceed model_df ({model_df})")

    r = acf(resid, lags + 1)[1:]
    k = np.arange(1, lags + 1)
    q_stat = float(n * (n + 2) * np.sum(r**2 / (n - k)))
    p_value = float(stats.chi2.sf(q_stat, dof))
    return q_stat, p_value


@dataclass
class Correlogram:
    """ACF and PACF of a series with their confidence band half-widths."""
    acf: np.ndarray
    pacf: np.ndarray
    acf_band: np.ndarray
    pacf_band: np.ndarray
    n_obs: int
    alpha: float

    def significant_lags(self, which: str = "acf") -> list[int]:
        """Lags >= 1 whose coefficient lies outside the confidence band."""
        if which == "acf":
            values, band = self.acf, self.acf_band
        elif which == "pacf":
            values, band = self.pacf, self.pacf_band
        else:
            raise ValueError(f"which must be 'acf' or 'pacf', got '{which}'")
        return [int(k) for k in np.flatnonzero(np.abs(values) > band) if k > 0]

    def to_dict(self) -> dict:
        return {
            "n_obs": self.n_obs,
            "alpha": self.alpha,
            "acf": self.acf.tolist(),
            "acf_band": self.acf_band.tolist(),
            "pacf": self.pacf.tolist(),
            "pacf_band": self.pacf_band.tolist(),
            "significant_acf_lags": self.significant_lags("acf"),
            "significant_pacf_lags": self.significant_lags("pacf"),
        }


def correlogram(x, lag: int = 40, alpha: float = 0.05) -> Correlogram:
    """Compute ACF (lags 0..lag) and PACF (lags 0..lag) with their bands."""
    x = as_series(x)
    n = len(x)
    acf_values = acf(x, lag + 1)
    pacf_values = pacf(x, lag)

    z = stats.norm.ppf(1.0 - alpha / 2.0)
    pacf_band = np.full(len(pacf_values), z / np.sqrt(n))

    logger.info(
        f"Correlogram on {n} samples up to lag {lag} (alpha={alpha})"
    )
    return Correlogram(
        acf=acf_values,
        pacf=pacf_values,
        acf_band=confidence_band(acf_values, n, alpha),
        pacf_band=pacf_band,
        n_obs=n,
        alpha=alpha,
    )
