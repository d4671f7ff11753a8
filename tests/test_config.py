# -*- coding: utf-8 -*-
"""Tests for engine configuration."""

from emissions_engine.config import (
    EmissionsEngineConfig,
    get_config,
    reset_config,
    set_config,
)


class TestConfigDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        config = EmissionsEngineConfig()
        assert config.default_region == "Global"
        assert config.region_confidence_boost == 0.1
        assert config.skipped_rows_warning_ratio == 0.1
        assert config.low_confidence_threshold == 0.7
        assert config.category_share_threshold_pct == 30.0
        assert config.offset_threshold_kg == 10000.0
        assert config.parallel_row_threshold == 5000
        assert config.worker_count == 4
        assert config.factors_path == ""
        assert config.enable_metrics is True
        assert config.log_level == "INFO"


class TestConfigFromEnv:
    """Test EMISSIONS_ENGINE_ environment overrides."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("EMISSIONS_ENGINE_DEFAULT_REGION", "UK")
        monkeypatch.setenv("EMISSIONS_ENGINE_LOW_CONFIDENCE_THRESHOLD", "0.5")
        monkeypatch.setenv("EMISSIONS_ENGINE_WORKER_COUNT", "8")
        monkeypatch.setenv("EMISSIONS_ENGINE_ENABLE_METRICS", "no")
        monkeypatch.setenv("EMISSIONS_ENGINE_FACTORS_PATH", "/tmp/factors.yaml")
        config = EmissionsEngineConfig.from_env()
        assert config.default_region == "UK"
        assert config.low_confidence_threshold == 0.5
        assert config.worker_count == 8
        assert config.enable_metrics is False
        assert config.factors_path == "/tmp/factors.yaml"

    def test_bool_values(self, monkeypatch):
        monkeypatch.setenv("EMISSIONS_ENGINE_ENABLE_METRICS", "YES")
        assert EmissionsEngineConfig.from_env().enable_metrics is True

    def test_invalid_values_fall_back(self, monkeypatch, caplog):
        """Unparseable numbers keep the default and log a warning."""
        monkeypatch.setenv("EMISSIONS_ENGINE_PARALLEL_ROW_THRESHOLD", "many")
        monkeypatch.setenv("EMISSIONS_ENGINE_OFFSET_THRESHOLD_KG", "lots")
        with caplog.at_level("WARNING", logger="emissions_engine.config"):
            config = EmissionsEngineConfig.from_env()
        assert config.parallel_row_threshold == 5000
        assert config.offset_threshold_kg == 10000.0
        assert "PARALLEL_ROW_THRESHOLD" in caplog.text


class TestConfigSingleton:
    """Test global config access."""

    def test_get_config_cached(self):
        assert get_config() is get_config()

    def test_get_config_reads_env(self, monkeypatch):
        monkeypatch.setenv("EMISSIONS_ENGINE_DEFAULT_REGION", "EU")
        reset_config()
        assert get_config().default_region == "EU"

    def test_set_and_reset(self):
        custom = EmissionsEngineConfig(default_region="US")
        set_config(custom)
        assert get_config() is custom
        reset_config()
        assert get_config() is not custom
