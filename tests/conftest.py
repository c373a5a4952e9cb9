"""Shared fixtures for the test suite.

Provides small seeded synthetic series (white noise, AR(1), random walk)
so the estimators can be checked against known generating processes
without any external data.
"""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Ensure project root is on the path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.data.simulation import simulate_ar, simulate_arima, white_noise  # noqa: E402


# ---------------------------------------------------------------------------
#  Sample series
# ---------------------------------------------------------------------------

@pytest.fixture
def noise_series() -> np.ndarray:
    """1000 samples of standard Gaussian white noise."""
    return white_noise(1000, sigma=1.0, seed=0)


@pytest.fixture
def ar1_phi() -> float:
    return 0.7


@pytest.fixture
def ar1_series(ar1_phi) -> np.ndarray:
    """2000 samples of a zero-mean AR(1) process."""
    return simulate_ar(2000, phi=[ar1_phi], sigma=1.0, seed=0)


@pytest.fixture
def trending_series() -> np.ndarray:
    """300 samples of an integrated ARMA(1,1) process (d=1)."""
    return simulate_arima(300, phi=[0.5], theta=[0.3], d=1, sigma=1.0, seed=1)


# ---------------------------------------------------------------------------
#  Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_config() -> dict:
    """Minimal merged config dict matching the project schema."""
    return {
        "data": {
            "n_samples": 200,
            "phi": [0.5],
            "theta": [],
            "d": 0,
            "sigma": 1.0,
            "seed": 7,
            "burn_in": 50,
        },
        "model": {
            "name": "ARIMA",
            "order": [1, 0, 1],
            "solver": "normal",
        },
        "forecast": {
            "horizon": 10,
            "holdout": 10,
        },
    }


# ---------------------------------------------------------------------------
#  Temp CSV fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_csv(tmp_path, trending_series) -> Path:
    """Write trending_series to a temp CSV (shuffled rows) and return its path."""
    dates = pd.date_range("2021-06-01", periods=len(trending_series), freq="1h")
    df = pd.DataFrame({"datetime": dates, "value": trending_series})
    df = df.sample(frac=1.0, random_state=0)
    csv_path = tmp_path / "series.csv"
    df.to_csv(csv_path, index=False)
    return csv_path
