# -*- coding: utf-8 -*-
"""Tests for Prometheus metric helpers."""

from prometheus_client import REGISTRY

from emissions_engine import metrics
from emissions_engine.calculator import EmissionsCalculator
from emissions_engine.config import EmissionsEngineConfig


def _sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricHelpers:
    """Test that helpers update the registered metrics."""

    def test_prometheus_available(self):
        assert metrics.PROMETHEUS_AVAILABLE is True

    def test_record_row_skipped(self):
        name = "emissions_engine_rows_skipped_total"
        labels = {"reason": "missing amount"}
        before = _sample(name, labels)
        metrics.record_row_skipped("missing amount")
        assert _sample(name, labels) == before + 1

    def test_record_row_processed(self):
        labels = {"category": "Waste"}
        before_rows = _sample("emissions_engine_rows_processed_total", labels)
        before_kg = _sample("emissions_engine_emissions_kg_total", labels)
        metrics.record_row_processed("Waste", 12.5)
        assert _sample("emissions_engine_rows_processed_total", labels) == before_rows + 1
        assert _sample("emissions_engine_emissions_kg_total", labels) == before_kg + 12.5

    def test_update_registry_size(self):
        metrics.update_registry_size(42)
        assert _sample("emissions_engine_registry_factors") == 42.0

    def test_calculation_recorded(self, registry):
        """A calculation with metrics enabled bumps the calculation counter."""
        labels = {"region": "US"}
        before = _sample("emissions_engine_calculations_total", labels)
        calculator = EmissionsCalculator(
            registry=registry, config=EmissionsEngineConfig(enable_metrics=True),
        )
        calculator.calculate_emissions([{"Activity": "coal", "Amount": 1}], region="US")
        assert _sample("emissions_engine_calculations_total", labels) == before + 1
