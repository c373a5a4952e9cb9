"""Compute ACF and PACF with confidence bands for order identification.

Reads the series from a CSV column or simulates it from
configs/simulation.yaml, optionally differences it, and writes the
correlogram (coefficients, band half-widths, significant lags) to JSON.

Rule of thumb:
    PACF cuts off after lag p  -> AR(p)
    ACF cuts off after lag q   -> MA(q)
    ACF decays very slowly     -> difference the series (d > 0)

Usage:
    python scripts/run_correlogram.py
    python scripts/run_correlogram.py --difference 1 --lag 30
    python scripts/run_correlogram.py --csv data/series.csv --column value
"""

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.data.preprocessing import difference, load_series_csv
from src.data.simulation import simulate_from_config
from src.evaluation.autocorrelation import correlogram
from src.utils.config import CONFIGS_DIR, load_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute ACF/PACF correlogram")
    parser.add_argument("--csv", type=str, default=None,
                        help="CSV file holding the series (default: simulate)")
    parser.add_argument("--column", type=str, default="value",
                        help="Value column in the CSV (default: value)")
    parser.add_argument("--datetime-column", type=str, default=None,
                        help="Datetime column used to sort the CSV rows")
    parser.add_argument("--lag", type=int, default=None,
                        help="Highest lag (default: correlogram.lag in config)")
    parser.add_argument("--alpha", type=float, default=None,
                        help="Significance level (default: correlogram.alpha)")
    parser.add_argument("--difference", type=int, default=0,
                        help="Difference the series this many times first")
    parser.add_argument("--experiment", type=str, default=None,
                        help="Path to an extra config YAML merged last")
    parser.add_argument("--output-dir", type=str, default="results/correlogram",
                        help="Output directory")
    args = parser.parse_args()

    config_files = [CONFIGS_DIR / "simulation.yaml", CONFIGS_DIR / "arima.yaml"]
    if args.experiment:
        config_files.append(args.experiment)
    config = load_config(config_files)
    corr_cfg = config.get("correlogram", {})
    lag = args.lag if args.lag is not None else int(corr_cfg.get("lag", 20))
    alpha = args.alpha if args.alpha is not None else float(corr_cfg.get("alpha", 0.05))

    if args.csv:
        series = load_series_csv(Path(args.csv), args.column, args.datetime_column)
    else:
        series = simulate_from_config(config)

    if args.difference > 0:
        # The leading values carry the cumulative base, not a difference
        series = difference(series, args.difference)[args.difference:]

    result = correlogram(series, lag=lag, alpha=alpha)

    print(f"\n{'='*60}")
    print(f"  Correlogram: n={result.n_obs}, lag={lag}, alpha={alpha}")
    print(f"  Significant ACF lags:  {result.significant_lags('acf')}")
    print(f"  Significant PACF lags: {result.significant_lags('pacf')}")
    print(f"{'='*60}")

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / "correlogram.json"
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)
    logger.info(f"Saved correlogram to {out_path}")


if __name__ == "__main__":
    main()
