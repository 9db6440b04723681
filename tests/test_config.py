"""Tests for configuration loading and validation."""

import pytest

import rebalance_config.loader as loader
from rebalance_config import AppConfig, GlidePathEntry, LoggingConfig, get_config, load_config


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    monkeypatch.setattr(loader, "_config", None)


class TestLoadConfig:
    def test_defaults_without_path(self):
        config = load_config(None)

        assert config.allocation.retirement.stock == 60.0
        assert config.tolerance.placement_budget_usd == 0.01
        assert config.distribution.table_path is None
        assert get_config() is config

    def test_get_config_before_load_raises(self):
        with pytest.raises(RuntimeError):
            get_config()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "allocation:\n"
            "  retirement:\n"
            "    stock: 70\n"
            "    bond: 25\n"
            "    inflation: 5\n"
            "  include_brokerage_in_retirement_pool: true\n"
            "outside_assets:\n"
            "  us_stock: 25000\n"
            "logging:\n"
            "  level: debug\n"
            "  format: json\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.allocation.retirement.inflation == 5.0
        assert config.allocation.brokerage.stock == 60.0
        assert config.allocation.include_brokerage_in_retirement_pool is True
        assert config.outside_assets.us_stock == 25000.0
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_percentages_not_summing_to_100(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("allocation:\n  brokerage:\n    stock: 50\n    bond: 20\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)


class TestModels:
    def test_glide_path_sorted_furthest_first(self):
        config = AppConfig(allocation={"glide_path": [
            {"years_to_retirement": 0, "stock": 50, "bond": 50},
            {"years_to_retirement": 10, "stock": 70, "bond": 30},
        ]})
        assert [entry.years_to_retirement for entry in config.allocation.glide_path] == [10, 0]

    def test_glide_path_duplicate_years_rejected(self):
        with pytest.raises(ValueError):
            AppConfig(allocation={"glide_path": [
                GlidePathEntry(years_to_retirement=5, stock=60, bond=40),
                GlidePathEntry(years_to_retirement=5, stock=50, bond=50),
            ]})

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD")
