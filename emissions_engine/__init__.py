# -*- coding: utf-8 -*-
"""
Emissions Engine
================

Converts heterogeneous tabular activity records (energy, transport, waste,
industrial, agriculture) into greenhouse-gas emission estimates in kg
CO2-equivalent. It supports:

- Heuristic extraction of activity, quantity, date and location from rows
  with arbitrary column names
- Token-overlap matching of activity descriptions against an ordered
  emission factor registry, with regional overrides
- Per-activity and per-category aggregation with per-bucket rounding
- Data-quality warnings and reduction recommendations
- Runtime registry extension and JSON/YAML factor catalogs
- Prometheus metrics and env-driven configuration (EMISSIONS_ENGINE_ prefix)

Key Components:
    - config: EmissionsEngineConfig with EMISSIONS_ENGINE_ env prefix
    - models: Pydantic v2 models for factors, data points and results
    - registry: EmissionFactorRegistry and the default catalog
    - field_extractor: FieldExtractor
    - activity_matcher: ActivityMatcher
    - row_processor: RowProcessor
    - aggregator: per-bucket aggregation
    - insights: InsightGenerator
    - calculator: EmissionsCalculator orchestrator
    - metrics: Prometheus metrics

Example:
    >>> from emissions_engine import EmissionsCalculator
    >>> calculator = EmissionsCalculator()
    >>> result = calculator.calculate_emissions(
    ...     [{"type": "Diesel car", "distance": "120"}], region="UK",
    ... )
    >>> result.category_breakdown
    {'Transport': 20.4}
"""

from emissions_engine._version import __version__

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from emissions_engine.config import (
    EmissionsEngineConfig,
    get_config,
    set_config,
    reset_config,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------
from emissions_engine.exceptions import (
    EmissionsEngineException,
    FactorRegistryError,
    ConfigurationError,
)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from emissions_engine.models import (
    GLOBAL_REGION,
    EmissionCategory,
    RejectionReason,
    EmissionFactor,
    ExtractedFields,
    ActivityMatch,
    ProcessedDataPoint,
    RowRejection,
    CalculationSummary,
    CalculationResult,
)

# ---------------------------------------------------------------------------
# Core engines
# ---------------------------------------------------------------------------
from emissions_engine.registry import DEFAULT_EMISSION_FACTORS, EmissionFactorRegistry
from emissions_engine.field_extractor import FieldExtractor
from emissions_engine.activity_matcher import ActivityMatcher, normalize_activity
from emissions_engine.row_processor import RowProcessor
from emissions_engine.aggregator import aggregate
from emissions_engine.insights import InsightGenerator
from emissions_engine.calculator import (
    EmissionsCalculator,
    get_default_calculator,
    reset_default_calculator,
)

__all__ = [
    "__version__",
    # Configuration
    "EmissionsEngineConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Exceptions
    "EmissionsEngineException",
    "FactorRegistryError",
    "ConfigurationError",
    # Models
    "GLOBAL_REGION",
    "EmissionCategory",
    "RejectionReason",
    "EmissionFactor",
    "ExtractedFields",
    "ActivityMatch",
    "ProcessedDataPoint",
    "RowRejection",
    "CalculationSummary",
    "CalculationResult",
    # Core engines
    "DEFAULT_EMISSION_FACTORS",
    "EmissionFactorRegistry",
    "FieldExtractor",
    "ActivityMatcher",
    "normalize_activity",
    "RowProcessor",
    "aggregate",
    "InsightGenerator",
    "EmissionsCalculator",
    "get_default_calculator",
    "reset_default_calculator",
]
