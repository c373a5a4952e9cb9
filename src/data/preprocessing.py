"""Series preprocessing: validation, lag windows and differencing.

``lag_view`` turns a 1-D series into the trailing-window design matrix used
by the AR and MA branches of the ARIMA model. ``difference`` and
``undo_difference`` implement the length-preserving differencing convention:

    difference([x0, x1, x2], 1)      = [x0, x1 - x0, x2 - x1]
    undo_difference([x0, d1, d2], 1) = [x0, x0 + d1, x0 + d1 + d2]

Element 0 is carried through as the cumulative base, so the series length is
invariant across calls and repeated cumulative summation is an exact inverse
of repeated differencing for every order d.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from src.utils.exceptions import InvalidOrderError


def load_series_csv(
    csv_path: Path,
    column: str,
    datetime_column: str | None = None,
) -> np.ndarray:
    """Load one numeric column of a CSV file as a series.

    Args:
        csv_path: Path to the CSV file.
        column: Name of the value column.
        datetime_column: Optional timestamp column; rows are sorted by it.

    Returns:
        Validated 1-D float array.

    Raises:
        KeyError: If a requested column is missing.
    """
    parse_dates = [datetime_column] if datetime_column else False
    df = pd.read_csv(csv_path, parse_dates=parse_dates)
    for col in filter(None, (column, datetime_column)):
        if col not in df.columns:
            raise KeyError(
                f"Column '{col}' not found in {csv_path}. "
                f"Available: {list(df.columns)}"
            )
    if datetime_column:
        df = df.sort_values(datetime_column).reset_index(drop=True)
    return as_series(df[column])


def as_series(x) -> np.ndarray:
    """Convert a list, array or pandas Series into a validated float array.

    Args:
        x: Ordered sequence of real values.

    Returns:
        A new 1-D float64 array (the caller's data is never aliased).

    Raises:
        ValueError: If the input is not 1-D or contains NaN/Inf values.
    """
    if isinstance(x, pd.Series):
        x = x.to_numpy()
    arr = np.array(x, dtype=np.float64)

    if arr.ndim != 1:
        raise ValueError(f"Expected a 1-D series, got shape {arr.shape}")
    if np.isnan(arr).any():
        raise ValueError(
            f"Series contains {np.isnan(arr).sum()} NaN values. "
            f"Clean the data before modelling."
        )
    if np.isinf(arr).any():
        raise ValueError(
            f"Series contains {np.isinf(arr).sum()} Inf values. "
            f"Clean the data before modelling."
        )
    return arr


def lag_view(x, order: int) -> tuple[np.ndarray, np.ndarray]:
    """Build trailing-window features and aligned targets.

    Row ``i`` holds ``[x_i, ..., x_{i+order-1}]`` (oldest value first) and
    ``targets[i] = x_{i+order}``, the value that follows the window.

    Args:
        x: 1-D series of length n.
        order: Window width, 1 <= order < n.

    Returns:
        rows: Array of shape (n - order, order).
        targets: Array of shape (n - order,).

    Raises:
        InvalidOrderError: If order < 1 or order >= n.
    """
    x = as_series(x)
    n = len(x)
    if order < 1 or order >= n:
        raise InvalidOrderError(
            f"Lag order must satisfy 1 <= order < len(x); "
            f"got order={order}, len(x)={n}"
        )

    n_rows = n - order
    # (n_rows, order) index grid: row i -> [i, i+1, ..., i+order-1]
    idx = np.arange(order)[None, :] + np.arange(n_rows)[:, None]
    rows = x[idx]
    targets = x[order:]
    return rows, targets


def difference(x, d: int = 1) -> np.ndarray:
    """Apply the length-preserving first difference ``d`` times.

    Args:
        x: 1-D series.
        d: Number of differencing passes (0 returns a copy).

    Returns:
        Differenced series with the same length as ``x``.

    Raises:
        ValueError: If d is negative.
    """
    if d < 0:
        raise ValueError(f"Differencing order must be >= 0, got {d}")
    x = as_series(x)
    for _ in range(d):
        x = np.r_[x[0], np.diff(x)]
    return x


def undo_difference(x, d: int = 1) -> np.ndarray:
    """Invert ``difference`` by cumulative summation applied ``d`` times.

    ``undo_difference(difference(x, d), d)`` reproduces ``x`` for any d
    because each pass restores the base value kept at index 0.

    Args:
        x: 1-D differenced series.
        d: Number of integration passes (0 returns a copy).

    Returns:
        Integrated series with the same length as ``x``.

    Raises:
        ValueError: If d is negative.
    """
    if d < 0:
        raise ValueError(f"Differencing order must be >= 0, got {d}")
    x = as_series(x)
    for _ in range(d):
        x = np.cumsum(x)
    return x


def left_pad(x: np.ndarray, width: int) -> np.ndarray:
    """Prepend ``width`` zeros so a lag view yields one row per observation."""
    return np.r_[np.zeros(width), x]


def train_test_split(
    x,
    holdout: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Split a series chronologically, keeping the last ``holdout`` points out.

    Args:
        x: 1-D series.
        holdout: Number of trailing observations for the test part.

    Returns:
        Tuple of (train, test).

    Raises:
        ValueError: If holdout is negative or leaves no training data.
    """
    x = as_series(x)
    if holdout < 0 or holdout >= len(x):
        raise ValueError(
            f"holdout must be in [0, {len(x)}), got {holdout}"
        )
    split = len(x) - holdout
    return x[:split], x[split:]
