"""Forecast accuracy metrics and JSON persistence."""

import json
import logging
from pathlib import Path

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

logger = logging.getLogger(__name__)

# Targets with |y| below this are excluded from MAPE
_MAPE_EPS = 1e-8


def compute_metrics(y_true, y_pred) -> dict[str, float]:
    """Score a forecast against held-out observations.

    Args:
        y_true: Observed values.
        y_pred: Forecast values, same length as ``y_true``.

    Returns:
        Dictionary with keys: "mse", "rmse", "mae", "mape", "r2". R² is NaN
        when fewer than two points are scored.

    Raises:
        ValueError: On length mismatch, empty input, or NaN/Inf values.
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()
    if len(y_true) != len(y_pred):
        raise ValueError(
            f"Length mismatch: y_true has {len(y_true)} values, "
            f"y_pred has {len(y_pred)}"
        )
    if len(y_true) == 0:
        raise ValueError("Cannot score an empty forecast")
    for name, arr in (("y_true", y_true), ("y_pred", y_pred)):
        if not np.isfinite(arr).all():
            raise ValueError(
                f"{name} contains {(~np.isfinite(arr)).sum()} NaN/Inf values"
            )

    mse = mean_squared_error(y_true, y_pred)
    mask = np.abs(y_true) > _MAPE_EPS
    if mask.any():
        mape = np.mean(np.abs((y_true[mask] - y_pred[mask]) / y_true[mask])) * 100
    else:
        mape = float("nan")
    r2 = r2_score(y_true, y_pred) if len(y_true) > 1 else float("nan")

    return {
        "mse": float(mse),
        "rmse": float(np.sqrt(mse)),
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "mape": float(mape),
        "r2": float(r2),
    }


def save_metrics(
    metrics: dict[str, float],
    model_name: str,
    output_path: Path,
    extra: dict | None = None,
) -> None:
    """Write metrics (and optional metadata) to a JSON file.

    Args:
        metrics: Metric name -> value.
        model_name: Label stored alongside the metrics, e.g. "ARIMA(2,1,1)".
        output_path: Destination file; parent directories are created.
        extra: Additional JSON-serialisable fields merged into the payload.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    payload: dict = {"model": model_name, "metrics": metrics}
    if extra:
        payload.update(extra)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    summary = ", ".join(f"{k.upper()}={v:.4f}" for k, v in metrics.items())
    logger.info(f"{model_name}: {summary} -> {output_path}")
