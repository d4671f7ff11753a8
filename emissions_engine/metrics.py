# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Emissions Engine

7 Prometheus metrics for emissions calculation monitoring with graceful
fallback when prometheus_client is not installed.

Metrics:
    1. emissions_engine_calculations_total (Counter, labels: region)
    2. emissions_engine_calculation_duration_seconds (Histogram, 10 buckets)
    3. emissions_engine_rows_processed_total (Counter, labels: category)
    4. emissions_engine_rows_skipped_total (Counter, labels: reason)
    5. emissions_engine_match_confidence (Histogram, buckets: 0.1-1.0 by 0.1)
    6. emissions_engine_emissions_kg_total (Counter, labels: category)
    7. emissions_engine_registry_factors (Gauge)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Graceful prometheus_client import
# ---------------------------------------------------------------------------

try:
    from prometheus_client import Counter, Gauge, Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    PROMETHEUS_AVAILABLE = False
    logger.info(
        "prometheus_client not installed; emissions engine metrics disabled"
    )


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

if PROMETHEUS_AVAILABLE:
    # 1. Calculations by selected region
    engine_calculations_total = Counter(
        "emissions_engine_calculations_total",
        "Total emissions calculations performed",
        labelnames=["region"],
    )

    # 2. Calculation duration (sub-millisecond to large batch runs)
    engine_calculation_duration_seconds = Histogram(
        "emissions_engine_calculation_duration_seconds",
        "Emissions calculation duration in seconds",
        buckets=(
            0.001, 0.005, 0.01, 0.05, 0.1,
            0.5, 1.0, 5.0, 15.0, 60.0,
        ),
    )

    # 3. Processed rows by matched category
    engine_rows_processed_total = Counter(
        "emissions_engine_rows_processed_total",
        "Total rows converted into emission data points",
        labelnames=["category"],
    )

    # 4. Skipped rows by rejection reason
    engine_rows_skipped_total = Counter(
        "emissions_engine_rows_skipped_total",
        "Total rows skipped during emissions calculation",
        labelnames=["reason"],
    )

    # 5. Activity match confidence (0.1 to 1.0 in 0.1 increments)
    engine_match_confidence = Histogram(
        "emissions_engine_match_confidence",
        "Activity match confidence score distribution",
        buckets=(0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0),
    )

    # 6. Calculated emissions by category
    engine_emissions_kg_total = Counter(
        "emissions_engine_emissions_kg_total",
        "Total calculated emissions in kg CO2e",
        labelnames=["category"],
    )

    # 7. Registry size
    engine_registry_factors = Gauge(
        "emissions_engine_registry_factors",
        "Number of emission factors in the active registry",
    )

else:
    # No-op placeholders
    engine_calculations_total = None  # type: ignore[assignment]
    engine_calculation_duration_seconds = None  # type: ignore[assignment]
    engine_rows_processed_total = None  # type: ignore[assignment]
    engine_rows_skipped_total = None  # type: ignore[assignment]
    engine_match_confidence = None  # type: ignore[assignment]
    engine_emissions_kg_total = None  # type: ignore[assignment]
    engine_registry_factors = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Helper functions (safe to call even without prometheus_client)
# ---------------------------------------------------------------------------


def record_calculation(region: str, duration_seconds: float) -> None:
    """Record a completed calculation with its duration.

    Args:
        region: Region the calculation ran for.
        duration_seconds: Wall-clock duration in seconds.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    engine_calculations_total.labels(region=region).inc()
    engine_calculation_duration_seconds.observe(duration_seconds)


def record_row_processed(category: str, emissions_kg: float) -> None:
    """Record one processed row and its emissions.

    Args:
        category: Category of the matched factor.
        emissions_kg: Emissions of the row in kg CO2e.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    engine_rows_processed_total.labels(category=category).inc()
    engine_emissions_kg_total.labels(category=category).inc(emissions_kg)


def record_row_skipped(reason: str) -> None:
    """Record one skipped row.

    Args:
        reason: Rejection reason value.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    engine_rows_skipped_total.labels(reason=reason).inc()


def record_match_confidence(confidence: float) -> None:
    """Record an activity match confidence score.

    Args:
        confidence: Confidence score between 0.0 and 1.0.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    engine_match_confidence.observe(confidence)


def update_registry_size(size: int) -> None:
    """Set the registry size gauge.

    Args:
        size: Number of factors in the registry.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    engine_registry_factors.set(size)


__all__ = [
    "PROMETHEUS_AVAILABLE",
    # Metric objects
    "engine_calculations_total",
    "engine_calculation_duration_seconds",
    "engine_rows_processed_total",
    "engine_rows_skipped_total",
    "engine_match_confidence",
    "engine_emissions_kg_total",
    "engine_registry_factors",
    # Helper functions
    "record_calculation",
    "record_row_processed",
    "record_row_skipped",
    "record_match_confidence",
    "update_registry_size",
]
