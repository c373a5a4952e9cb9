"""Exception types raised by the time series toolkit.

Every error derives from ``TimeSeriesError`` and from the builtin a caller
would naturally catch (``ValueError``, ``RuntimeError`` or numpy's
``LinAlgError``), so generic handlers keep working.
"""

import numpy as np


class TimeSeriesError(Exception):
    """Base class for all toolkit errors."""


class InvalidOrderError(TimeSeriesError, ValueError):
    """Lag order is < 1 or leaves no complete window in the series."""


class SingularMatrixError(TimeSeriesError, np.linalg.LinAlgError):
    """The normal-equation matrix X'X cannot be inverted."""


class NotFittedError(TimeSeriesError, RuntimeError):
    """A model was used before ``fit()`` was called."""


class NoFeaturesError(TimeSeriesError, ValueError):
    """An ARIMA model with p == q == 0 has no regressors."""


class DegenerateInputError(TimeSeriesError, ValueError):
    """A series with zero variance was passed to a correlation estimator."""
