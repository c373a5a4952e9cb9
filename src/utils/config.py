"""YAML configuration loading for model orders and simulation settings.

Configs live in ``configs/`` at the project root. Several files can be
combined; later files take precedence and nested sections are merged key by
key, so an experiment file only needs to list what it changes.
"""

from pathlib import Path
from typing import Any

import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIGS_DIR = PROJECT_ROOT / "configs"
DEFAULT_CONFIGS = ("simulation.yaml", "arima.yaml")


def _deep_merge(base: dict, override: dict) -> dict:
    """Return a copy of ``base`` with ``override`` merged in recursively."""
    merged = base.copy()
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_paths: list[str | Path] | None = None) -> dict[str, Any]:
    """Load and merge YAML config files.

    Args:
        config_paths: Files to merge in order. Defaults to the project's
            ``configs/simulation.yaml`` and ``configs/arima.yaml``.

    Returns:
        Merged configuration dictionary.

    Raises:
        FileNotFoundError: If a config file does not exist.
        ValueError: If a file does not contain a YAML mapping.
    """
    if config_paths is None:
        config_paths = [CONFIGS_DIR / name for name in DEFAULT_CONFIGS]

    merged: dict[str, Any] = {}
    for path in config_paths:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        merged = _deep_merge(merged, config)
    return merged


def set_override(config: dict, dotted_key: str, value: Any) -> dict:
    """Set ``config["a"]["b"] = value`` for ``dotted_key="a.b"``.

    Missing intermediate sections are created. Returns a new dictionary and
    leaves ``config`` unchanged.
    """
    keys = dotted_key.split(".")
    patch: dict = {keys[-1]: value}
    for key in reversed(keys[:-1]):
        patch = {key: patch}
    return _deep_merge(config, patch)
