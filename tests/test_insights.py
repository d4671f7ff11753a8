# -*- coding: utf-8 -*-
"""Tests for warnings and recommendations."""

import pytest

from emissions_engine.config import EmissionsEngineConfig
from emissions_engine.insights import (
    LOW_CONFIDENCE_WARNING,
    LOW_EMISSIONS_RECOMMENDATION,
    OFFSET_RECOMMENDATION,
    InsightGenerator,
)
from emissions_engine.models import RejectionReason, RowRejection


@pytest.fixture
def insights(engine_config):
    return InsightGenerator(engine_config)


def _rejections(count):
    return [
        RowRejection(row_index=i, reason=RejectionReason.MISSING_AMOUNT)
        for i in range(count)
    ]


# ==============================================================================
# Warnings
# ==============================================================================

class TestWarnings:
    """Test data-quality warnings."""

    def test_no_warnings_for_clean_data(self, insights):
        assert insights.generate_warnings([], 10, 0.95) == []

    def test_row_warnings_then_skipped_warning(self, insights):
        """15 of 100 rows skipped: 15 row warnings plus one aggregate warning."""
        warnings = insights.generate_warnings(_rejections(15), 100, 0.9)
        assert len(warnings) == 16
        assert warnings[0] == "Row 1: missing amount"
        assert warnings[14] == "Row 15: missing amount"
        assert warnings[15] == "15 rows were skipped due to insufficient data"

    def test_skipped_ratio_is_strict(self, insights):
        """Exactly 10% skipped does not add the aggregate warning."""
        warnings = insights.generate_warnings(_rejections(10), 100, 0.9)
        assert len(warnings) == 10

    def test_low_confidence_last(self, insights):
        warnings = insights.generate_warnings(_rejections(1), 2, 0.5)
        assert warnings == [
            "Row 1: missing amount",
            "1 rows were skipped due to insufficient data",
            LOW_CONFIDENCE_WARNING,
        ]

    def test_confidence_threshold_is_strict(self, insights):
        assert insights.generate_warnings([], 1, 0.7) == []

    def test_empty_input(self, insights):
        """No rows means zero confidence, hence the low-confidence warning."""
        assert insights.generate_warnings([], 0, 0.0) == [LOW_CONFIDENCE_WARNING]


# ==============================================================================
# Recommendations
# ==============================================================================

class TestRecommendations:
    """Test reduction recommendations."""

    def test_dominant_category(self, insights):
        recommendations = insights.generate_recommendations(
            {"Energy": 4000.0, "Transport": 1000.0},
        )
        assert recommendations == [
            "Energy accounts for 80.0% of emissions. "
            "Consider switching to renewable energy sources.",
        ]

    def test_share_at_or_below_threshold(self, insights):
        recommendations = insights.generate_recommendations(
            {"Energy": 25.0, "Transport": 75.0},
        )
        assert len(recommendations) == 1
        assert recommendations[0].startswith("Transport accounts for 75.0%")

    def test_several_categories_in_breakdown_order(self, insights):
        recommendations = insights.generate_recommendations(
            {"Waste": 40.0, "Industrial": 40.0, "Agriculture": 20.0},
        )
        assert recommendations == [
            "Waste accounts for 40.0% of emissions. "
            "Implement better recycling and waste reduction programs.",
            "Industrial processes account for 40.0% of emissions. "
            "Look into process optimization and cleaner technologies.",
        ]

    def test_offset_for_large_totals(self, insights):
        recommendations = insights.generate_recommendations({"Energy": 20000.0})
        assert recommendations[0].startswith("Energy accounts for 100.0%")
        assert recommendations[-1] == OFFSET_RECOMMENDATION
        assert len(recommendations) == 2

    def test_share_ties_round_up(self, insights):
        """56.25% prints as 56.3% and 43.75% as 43.8%."""
        recommendations = insights.generate_recommendations(
            {"Energy": 9.0, "Transport": 7.0},
        )
        assert recommendations[0].startswith("Energy accounts for 56.3% of emissions.")
        assert recommendations[1].startswith("Transport accounts for 43.8% of emissions.")

    def test_unknown_category_has_no_template(self, insights):
        assert insights.generate_recommendations({"Water": 500.0}) == [
            LOW_EMISSIONS_RECOMMENDATION,
        ]

    def test_empty_breakdown(self, insights):
        assert insights.generate_recommendations({}) == [LOW_EMISSIONS_RECOMMENDATION]

    def test_custom_thresholds(self):
        config = EmissionsEngineConfig(
            enable_metrics=False,
            category_share_threshold_pct=90.0,
            offset_threshold_kg=100.0,
        )
        recommendations = InsightGenerator(config).generate_recommendations(
            {"Energy": 80.0, "Transport": 40.0},
        )
        assert recommendations == [OFFSET_RECOMMENDATION]
