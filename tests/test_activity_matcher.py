# -*- coding: utf-8 -*-
"""Tests for activity matching against the factor registry."""

import pytest

from emissions_engine.activity_matcher import (
    ActivityMatcher,
    normalize_activity,
    score_tokens,
)
from emissions_engine.config import EmissionsEngineConfig
from emissions_engine.registry import EmissionFactorRegistry


def _factor(activity, factor_id, region="Global"):
    return {
        "factor_id": factor_id, "activity": activity, "category": "Energy",
        "factor": 1.0, "unit": "kWh", "region": region,
    }


# ==============================================================================
# Scoring
# ==============================================================================

class TestNormalizeActivity:
    """Test activity text normalisation."""

    def test_punctuation_becomes_space(self):
        assert normalize_activity("  Petrol-Car!! (UK) ") == "petrol car uk"

    def test_digits_kept(self):
        assert normalize_activity("Scope 2 electricity") == "scope 2 electricity"

    def test_only_punctuation(self):
        assert normalize_activity("!!! ---") == ""


class TestScoreTokens:
    """Test token-overlap scoring."""

    def test_exact(self):
        assert score_tokens("natural gas", "natural gas") == 1.0

    def test_reordered_tokens(self):
        assert score_tokens("car petrol", "petrol car") == 1.0

    def test_extra_input_token(self):
        """One identical token out of two gives 0.5."""
        assert score_tokens("electricity consumption", "electricity") == 0.5

    def test_containment(self):
        """A token contained in another scores 0.7."""
        assert score_tokens("electric", "electricity") == pytest.approx(0.7)

    def test_no_overlap(self):
        assert score_tokens("xyz", "coal") == 0.0

    def test_empty_input(self):
        assert score_tokens("", "coal") == 0.0

    def test_score_capped_at_one(self):
        """Repeated tokens cannot push the score above 1."""
        assert score_tokens("gas gas gas", "natural gas") == 1.0


# ==============================================================================
# Matching
# ==============================================================================

class TestActivityMatcher:
    """Test best-entry selection."""

    def test_docstring_example(self, matcher):
        match = matcher.match("Car (petrol)")
        assert match.canonical_activity == "petrol car"
        assert match.confidence == 1.0

    def test_partial_match_takes_first_best(self, matcher):
        """'electricity consumption' ties US and renewable; US comes first."""
        match = matcher.match("Electricity consumption")
        assert match.factor.factor_id == "electricity_grid_us"
        assert match.confidence == 0.5
        assert match.score == 0.5
        assert match.regional_override is False

    def test_unmatched(self, matcher):
        assert matcher.match("quantum teleportation") is None

    def test_empty_after_normalisation(self, matcher):
        """Pure punctuation never matches."""
        assert matcher.match("???") is None

    def test_tie_break_follows_registry_order(self, engine_config):
        """Equal scores keep the entry added first."""
        registry = EmissionFactorRegistry([
            _factor("solar power", "first"),
            _factor("solar panel", "second"),
        ])
        matcher = ActivityMatcher(registry, engine_config)
        assert matcher.match("solar").factor.factor_id == "first"

        flipped = EmissionFactorRegistry([
            _factor("solar panel", "second"),
            _factor("solar power", "first"),
        ])
        matcher = ActivityMatcher(flipped, engine_config)
        assert matcher.match("solar").factor.factor_id == "second"

    def test_deterministic(self, matcher):
        first = matcher.match("diesel vehicle")
        second = matcher.match("diesel vehicle")
        assert first == second


class TestRegionalOverride:
    """Test region-specific entry preference."""

    def test_override_and_boost(self, matcher):
        """EU replaces the generic best match and adds 0.1 confidence."""
        match = matcher.match("electricity consumption", region="EU")
        assert match.factor.factor_id == "electricity_grid_eu"
        assert match.factor.factor == 0.3
        assert match.confidence == pytest.approx(0.6)
        assert match.score == 0.5
        assert match.regional_override is True

    def test_boost_is_capped(self, matcher):
        match = matcher.match("electricity", region="EU")
        assert match.confidence == 1.0
        assert match.regional_override is True

    def test_best_match_already_regional(self, matcher):
        """The boost applies even when the best entry is the regional one."""
        match = matcher.match("petrol car", region="UK")
        assert match.factor.factor_id == "petrol_car"
        assert match.regional_override is True
        assert match.confidence == 1.0

    def test_no_regional_entry(self, matcher):
        """Without a regional entry the generic match stands."""
        match = matcher.match("natural gas", region="US")
        assert match.factor.region == "Global"
        assert match.regional_override is False

    def test_global_region_disables_override(self, matcher):
        match = matcher.match("electricity", region="Global")
        assert match.factor.factor_id == "electricity_grid_us"
        assert match.regional_override is False

    def test_custom_boost(self, registry):
        config = EmissionsEngineConfig(enable_metrics=False, region_confidence_boost=0.25)
        matcher = ActivityMatcher(registry, config)
        match = matcher.match("electricity consumption", region="EU")
        assert match.confidence == pytest.approx(0.75)


class TestMatcherStatistics:
    """Test matching counters."""

    def test_statistics(self, matcher):
        matcher.match("coal")
        matcher.match("electricity", region="EU")
        matcher.match("quantum teleportation")
        stats = matcher.get_statistics()
        assert stats == {
            "matches": 2,
            "exact_matches": 2,
            "regional_overrides": 1,
            "unmatched": 1,
        }
