# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import json
import os
from pathlib import Path
from typing import Any, Dict, List

import pytest

from emissions_engine.activity_matcher import ActivityMatcher
from emissions_engine.calculator import EmissionsCalculator, reset_default_calculator
from emissions_engine.config import EmissionsEngineConfig, reset_config
from emissions_engine.registry import EmissionFactorRegistry


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch):
    """Reset singletons and strip engine env vars around every test."""
    for name in list(os.environ):
        if name.startswith("EMISSIONS_ENGINE_"):
            monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_default_calculator()
    yield
    reset_config()
    reset_default_calculator()


@pytest.fixture
def engine_config() -> EmissionsEngineConfig:
    """Default configuration with metrics switched off."""
    return EmissionsEngineConfig(enable_metrics=False)


@pytest.fixture
def registry() -> EmissionFactorRegistry:
    """Registry holding the built-in catalog."""
    return EmissionFactorRegistry()


@pytest.fixture
def matcher(registry, engine_config) -> ActivityMatcher:
    return ActivityMatcher(registry, engine_config)


@pytest.fixture
def calculator(registry, engine_config) -> EmissionsCalculator:
    return EmissionsCalculator(registry=registry, config=engine_config)


@pytest.fixture
def custom_factors() -> List[Dict[str, Any]]:
    """Two extra catalog entries not present in the default catalog."""
    return [
        {
            "factor_id": "biogas",
            "activity": "Biogas",
            "category": "Energy",
            "factor": 0.2,
            "unit": "m³",
            "source": "Internal 2024",
            "year": 2024,
        },
        {
            "factor_id": "cargo_bike",
            "activity": "cargo bike",
            "category": "Transport",
            "factor": 0.005,
            "unit": "km",
            "region": "EU",
        },
    ]


@pytest.fixture
def factors_json(tmp_path, custom_factors) -> Path:
    path = tmp_path / "factors.json"
    path.write_text(json.dumps({"factors": custom_factors}), encoding="utf-8")
    return path
