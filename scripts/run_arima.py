"""Fit an ARIMA model and score its forecast on a held-out tail.

The series comes from a CSV column or, by default, from the synthetic
process described in configs/simulation.yaml. The last ``holdout`` points
are kept out of fitting and compared against the recursive forecast.

Usage:
    python scripts/run_arima.py
    python scripts/run_arima.py --order 1 0 1 --horizon 30
    python scripts/run_arima.py --csv data/series.csv --column value
    python scripts/run_arima.py --experiment configs/my_experiment.yaml
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.data.preprocessing import load_series_csv, train_test_split
from src.data.simulation import simulate_from_config
from src.evaluation.autocorrelation import ljung_box
from src.evaluation.metrics import compute_metrics, save_metrics
from src.models.arima import ARIMAModel
from src.utils.config import CONFIGS_DIR, load_config, set_override

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def run(config: dict, series: np.ndarray, output_dir: Path) -> dict:
    """Fit on the training part, forecast the holdout and save artifacts.

    Args:
        config: Merged configuration dictionary.
        series: Full observed series.
        output_dir: Directory receiving metrics.json and forecast.json.

    Returns:
        Metrics dictionary (empty when holdout is 0).
    """
    holdout = int(config["forecast"].get("holdout", 0))
    horizon = max(int(config["forecast"].get("horizon", holdout)), holdout)
    train, test = train_test_split(series, holdout)

    model = ARIMAModel.from_config(config)
    model_name = f"ARIMA({model.p},{model.d},{model.q})"

    print(f"\n{'='*60}")
    print(f"  Fitting {model_name}")
    print(f"  Train samples: {len(train)}")
    print(f"  Holdout samples: {len(test)}")
    print(f"  Forecast horizon: {horizon}")
    print(f"{'='*60}\n")

    model.fit(train)
    summary = model.summary()
    q_stat, p_value = ljung_box(
        model.resid_,
        lags=max(10, model.p + model.q + 1),
        model_df=model.p + model.q,
    )
    summary["ljung_box"] = {"q_stat": q_stat, "p_value": p_value}
    logger.info(f"  AR coefficients: {np.round(summary['ar'], 4).tolist()}")
    logger.info(f"  MA coefficients: {np.round(summary['ma'], 4).tolist()}")
    logger.info(f"  Ljung-Box residual test: Q={q_stat:.2f}, p={p_value:.4f}")

    output = model.forecast(train, horizon)
    future = output[len(train):]

    output_dir.mkdir(parents=True, exist_ok=True)
    metrics: dict = {}
    if holdout > 0:
        metrics = compute_metrics(test, future[:holdout])
        save_metrics(
            metrics, model_name, output_dir / "metrics.json",
            extra={"summary": summary},
        )

    with open(output_dir / "forecast.json", "w", encoding="utf-8") as f:
        json.dump(
            {
                "model": model_name,
                "train": train.tolist(),
                "test": test.tolist(),
                "in_sample": output[:len(train)].tolist(),
                "forecast": future.tolist(),
            },
            f,
            indent=2,
        )

    print(f"\nAll outputs saved to: {output_dir}")
    return metrics


def main() -> None:
    parser = argparse.ArgumentParser(description="Fit and forecast an ARIMA model")
    parser.add_argument("--csv", type=str, default=None,
                        help="CSV file holding the series (default: simulate)")
    parser.add_argument("--column", type=str, default="value",
                        help="Value column in the CSV (default: value)")
    parser.add_argument("--datetime-column", type=str, default=None,
                        help="Optional timestamp column used for sorting")
    parser.add_argument("--order", type=int, nargs=3, default=None,
                        metavar=("P", "D", "Q"), help="Override model order")
    parser.add_argument("--horizon", type=int, default=None,
                        help="Override forecast horizon")
    parser.add_argument("--holdout", type=int, default=None,
                        help="Override number of held-out points")
    parser.add_argument("--experiment", type=str, default=None,
                        help="Path to an extra config YAML merged last")
    parser.add_argument("--output-dir", type=str, default=None,
                        help="Output directory (default: results/<model>_<timestamp>)")
    args = parser.parse_args()

    config_files = [CONFIGS_DIR / "simulation.yaml", CONFIGS_DIR / "arima.yaml"]
    if args.experiment:
        config_files.append(args.experiment)
    config = load_config(config_files)

    if args.order:
        config = set_override(config, "model.order", list(args.order))
    if args.horizon is not None:
        config = set_override(config, "forecast.horizon", args.horizon)
    if args.holdout is not None:
        config = set_override(config, "forecast.holdout", args.holdout)

    if args.csv:
        series = load_series_csv(Path(args.csv), args.column, args.datetime_column)
        logger.info(f"Loaded {len(series)} values from {args.csv}:{args.column}")
    else:
        series = simulate_from_config(config)
        logger.info(f"Simulated {len(series)} values from configs/simulation.yaml")

    if args.output_dir:
        output_dir = Path(args.output_dir)
    else:
        p, d, q = config["model"]["order"]
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_dir = Path(config.get("output", {}).get("results_dir", "results"))
        output_dir = results_dir / f"ARIMA_{p}{d}{q}_{timestamp}"

    run(config, series, output_dir)


if __name__ == "__main__":
    main()
