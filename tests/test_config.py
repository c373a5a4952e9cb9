"""Tests for YAML config loading, merging and overrides."""

from pathlib import Path

import pytest
import yaml

from src.models.arima import ARIMAModel
from src.utils.config import CONFIGS_DIR, _deep_merge, load_config, set_override


# ---------------------------------------------------------------------------
#  Deep merge
# ---------------------------------------------------------------------------

class TestDeepMerge:
    """Tests for config _deep_merge utility."""

    def test_flat_override(self):
        merged = _deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert merged == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self):
        base = {"model": {"order": [1, 0, 0], "solver": "normal"}}
        merged = _deep_merge(base, {"model": {"solver": "pinv"}})
        assert merged["model"]["order"] == [1, 0, 0]
        assert merged["model"]["solver"] == "pinv"

    def test_base_unchanged(self):
        base = {"a": {"x": 1}}
        _ = _deep_merge(base, {"a": {"x": 2}})
        assert base["a"]["x"] == 1

    def test_list_replaced_not_merged(self):
        merged = _deep_merge({"data": {"phi": [0.1, 0.2]}}, {"data": {"phi": [0.9]}})
        assert merged["data"]["phi"] == [0.9]


# ---------------------------------------------------------------------------
#  load_config
# ---------------------------------------------------------------------------

class TestLoadConfig:
    """Tests for YAML config loading and merging."""

    def test_load_single_config(self, tmp_path):
        cfg_path = tmp_path / "test.yaml"
        cfg_path.write_text("model:\n  order: [2, 1, 0]\n")
        assert load_config([cfg_path])["model"]["order"] == [2, 1, 0]

    def test_load_and_merge(self, tmp_path):
        """Later configs should override earlier ones."""
        base = tmp_path / "base.yaml"
        base.write_text("model:\n  order: [1, 0, 0]\n  solver: normal\n")
        override = tmp_path / "override.yaml"
        override.write_text("model:\n  solver: pinv\n")
        result = load_config([base, override])
        assert result["model"]["order"] == [1, 0, 0]
        assert result["model"]["solver"] == "pinv"

    def test_empty_file(self, tmp_path):
        cfg_path = tmp_path / "empty.yaml"
        cfg_path.write_text("")
        assert load_config([cfg_path]) == {}

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config([Path("nonexistent.yaml")])

    def test_non_mapping_raises(self, tmp_path):
        cfg_path = tmp_path / "list.yaml"
        cfg_path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config([cfg_path])


# ---------------------------------------------------------------------------
#  Project configs
# ---------------------------------------------------------------------------

class TestProjectConfigs:
    """Validate the config files shipped in configs/."""

    @pytest.mark.parametrize("filename", ["arima.yaml", "simulation.yaml"])
    def test_yaml_loads(self, filename):
        with open(CONFIGS_DIR / filename, encoding="utf-8") as f:
            assert isinstance(yaml.safe_load(f), dict)

    def test_defaults_build_model(self):
        """The default merged config should describe a valid ARIMA order."""
        config = load_config()
        assert len(config["model"]["order"]) == 3
        assert "n_samples" in config["data"]
        model = ARIMAModel.from_config(config)
        assert model.p + model.q > 0


# ---------------------------------------------------------------------------
#  set_override
# ---------------------------------------------------------------------------

class TestSetOverride:
    """Tests for dotted-key CLI overrides."""

    def test_nested_key(self, sample_config):
        updated = set_override(sample_config, "model.order", [3, 1, 0])
        assert updated["model"]["order"] == [3, 1, 0]
        assert updated["model"]["solver"] == "normal"

    def test_original_untouched(self, sample_config):
        set_override(sample_config, "forecast.horizon", 99)
        assert sample_config["forecast"]["horizon"] == 10

    def test_creates_sections(self):
        assert set_override({}, "output.results_dir", "out") == {
            "output": {"results_dir": "out"}
        }
