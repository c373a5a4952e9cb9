"""Synthetic stochastic processes for experiments and tests.

White noise:
    eps_t ~ N(0, sigma^2), independent across t

MA(q):
    y_t = eps_t + theta_1*eps_{t-1} + ... + theta_q*eps_{t-q}

AR(p):
    y_t = phi_1*y_{t-1} + ... + phi_p*y_{t-p} + eps_t

ARMA(p, q):
    y_t = sum_i phi_i*y_{t-i} + eps_t + sum_j theta_j*eps_{t-j}

ARIMA(p, d, q):
    ARMA(p, q) integrated d times (cumulative sums), e.g. d=1 with
    phi = theta = [] is a random walk.

All generators draw from ``numpy.random.default_rng(seed)`` so results are
reproducible, and AR recursions discard a burn-in prefix so the returned
samples are close to the stationary distribution.
"""

import logging
from collections.abc import Sequence

import numpy as np

from src.data.preprocessing import undo_difference

logger = logging.getLogger(__name__)


def _check_length(n: int) -> None:
    if n < 1:
        raise ValueError(f"Series length must be positive, got {n}")


def white_noise(n: int, sigma: float = 1.0, seed: int | None = 42) -> np.ndarray:
    """Draw ``n`` i.i.d. Gaussian samples with standard deviation ``sigma``."""
    _check_length(n)
    rng = np.random.default_rng(seed)
    return rng.normal(0.0, sigma, n)


def simulate_arma(
    n: int,
    phi: Sequence[float] = (),
    theta: Sequence[float] = (),
    sigma: float = 1.0,
    seed: int | None = 42,
    burn_in: int = 200,
) -> np.ndarray:
    """Simulate an ARMA(p, q) process.

    Args:
        n: Number of samples returned.
        phi: AR coefficients [phi_1, ..., phi_p].
        theta: MA coefficients [theta_1, ..., theta_q].
        sigma: Innovation standard deviation.
        seed: Random seed.
        burn_in: Leading samples generated and discarded.

    Returns:
        Array of shape (n,).
    """
    _check_length(n)
    if burn_in < 0:
        raise ValueError(f"burn_in must be >= 0, got {burn_in}")

    phi = np.asarray(phi, dtype=np.float64)
    theta = np.asarray(theta, dtype=np.float64)
    p, q = len(phi), len(theta)
    offset = max(p, q)
    total = n + burn_in + offset

    rng = np.random.default_rng(seed)
    eps = rng.normal(0.0, sigma, total)
    y = np.zeros(total)

    for t in range(offset, total):
        # Most recent value first to line up with phi_1, theta_1
        ar_part = np.dot(phi, y[t - p:t][::-1]) if p > 0 else 0.0
        ma_part = np.dot(theta, eps[t - q:t][::-1]) if q > 0 else 0.0
        y[t] = ar_part + eps[t] + ma_part

    logger.debug(
        f"Simulated ARMA({p},{q}) with n={n}, sigma={sigma}, burn_in={burn_in}"
    )
    return y[-n:]


def simulate_ar(
    n: int,
    phi: Sequence[float],
    sigma: float = 1.0,
    seed: int | None = 42,
    burn_in: int = 200,
) -> np.ndarray:
    """Simulate an AR(p) process (see ``simulate_arma``)."""
    return simulate_arma(n, phi=phi, sigma=sigma, seed=seed, burn_in=burn_in)


def simulate_ma(
    n: int,
    theta: Sequence[float],
    sigma: float = 1.0,
    seed: int | None = 42,
) -> np.ndarray:
    """Simulate an MA(q) process. No burn-in is needed for a finite MA."""
    return simulate_arma(n, theta=theta, sigma=sigma, seed=seed, burn_in=0)


def simulate_arima(
    n: int,
    phi: Sequence[float] = (),
    theta: Sequence[float] = (),
    d: int = 1,
    sigma: float = 1.0,
    seed: int | None = 42,
    burn_in: int = 200,
) -> np.ndarray:
    """Simulate ARIMA(p, d, q) by integrating an ARMA path ``d`` times."""
    stationary = simulate_arma(
        n, phi=phi, theta=theta, sigma=sigma, seed=seed, burn_in=burn_in,
    )
    return undo_difference(stationary, d)


def simulate_from_config(config: dict) -> np.ndarray:
    """Simulate a series from the ``data`` section of a merged config.

    Expected keys (all optional): ``n_samples``, ``phi``, ``theta``, ``d``,
    ``sigma``, ``seed``, ``burn_in``.
    """
    data_cfg = config.get("data", {})
    return simulate_arima(
        n=int(data_cfg.get("n_samples", 500)),
        phi=data_cfg.get("phi", []) or [],
        theta=data_cfg.get("theta", []) or [],
        d=int(data_cfg.get("d", 0)),
        sigma=float(data_cfg.get("sigma", 1.0)),
        seed=data_cfg.get("seed", 42),
        burn_in=int(data_cfg.get("burn_in", 200)),
    )
