"""Tests for src/data/simulation.py — seeded synthetic processes."""

import numpy as np
import pytest

from src.data.preprocessing import undo_difference
from src.data.simulation import (
    simulate_ar,
    simulate_arima,
    simulate_arma,
    simulate_from_config,
    simulate_ma,
    white_noise,
)
from src.evaluation.autocorrelation import acf


class TestWhiteNoise:
    """Tests for the Gaussian white-noise generator."""

    def test_length_and_scale(self):
        x = white_noise(10_000, sigma=2.0, seed=0)
        assert len(x) == 10_000
        assert np.std(x) == pytest.approx(2.0, abs=0.1)
        assert np.mean(x) == pytest.approx(0.0, abs=0.1)

    def test_reproducible(self):
        np.testing.assert_array_equal(white_noise(50, seed=3), white_noise(50, seed=3))

    def test_seed_changes_draws(self):
        assert not np.allclose(white_noise(50, seed=3), white_noise(50, seed=4))

    def test_invalid_length(self):
        with pytest.raises(ValueError, match="positive"):
            white_noise(0)


class TestARMA:
    """Tests for AR, MA and ARMA recursions."""

    def test_ar1_lag1_correlation(self):
        x = simulate_ar(5000, phi=[0.6], seed=2)
        assert acf(x, 2)[1] == pytest.approx(0.6, abs=0.05)

    def test_ma_is_finite_memory(self):
        """An MA(2) process should be uncorrelated beyond lag 2."""
        x = simulate_ma(5000, theta=[0.7, 0.4], seed=2)
        values = acf(x, 6)
        assert abs(values[2]) > 0.15
        assert np.all(np.abs(values[3:]) < 0.08)

    def test_empty_coefficients_are_noise(self):
        """ARMA(0, 0) should reduce to the innovations themselves."""
        x = simulate_arma(100, seed=9, burn_in=0)
        np.testing.assert_allclose(x, white_noise(100, seed=9))

    def test_negative_burn_in(self):
        with pytest.raises(ValueError, match="burn_in"):
            simulate_arma(10, phi=[0.5], burn_in=-1)


class TestARIMA:
    """Tests for integrated processes."""

    def test_integrates_arma(self):
        stationary = simulate_arma(200, phi=[0.4], theta=[0.2], seed=5)
        integrated = simulate_arima(200, phi=[0.4], theta=[0.2], d=2, seed=5)
        np.testing.assert_allclose(integrated, undo_difference(stationary, 2))

    def test_from_config(self, sample_config):
        x = simulate_from_config(sample_config)
        assert len(x) == sample_config["data"]["n_samples"]
        np.testing.assert_allclose(x, simulate_from_config(sample_config))

    def test_from_empty_config_uses_defaults(self):
        assert len(simulate_from_config({})) == 500
