# -*- coding: utf-8 -*-
"""
Emissions Calculator

Public entry point of the engine. ``EmissionsCalculator.calculate_emissions``
runs every row through the row processor, aggregates the processed points,
derives warnings and recommendations, and returns one CalculationResult.

The calculation performs no I/O and never raises for a sequence of row
records: row-level problems become rejections and warnings, and an empty
input yields a zero result.

Rows are independent, so large inputs are processed on a thread pool
(``parallel_row_threshold`` / ``worker_count``). Results are collected in
input order before aggregation, so parallelism never changes the output.

Example:
    >>> from emissions_engine.calculator import EmissionsCalculator
    >>> calculator = EmissionsCalculator()
    >>> result = calculator.calculate_emissions(
    ...     [{"Activity": "Electricity consumption", "Amount": "1250"}],
    ... )
    >>> result.total_emissions
    500.0
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

from emissions_engine.activity_matcher import ActivityMatcher
from emissions_engine.aggregator import aggregate, round_half_up
from emissions_engine.config import EmissionsEngineConfig, get_config
from emissions_engine.field_extractor import FieldExtractor
from emissions_engine.insights import InsightGenerator
from emissions_engine.metrics import (
    record_calculation,
    record_match_confidence,
    record_row_processed,
    record_row_skipped,
    update_registry_size,
)
from emissions_engine.models import (
    CalculationResult,
    CalculationSummary,
    EmissionFactor,
    ProcessedDataPoint,
    RowRejection,
)
from emissions_engine.registry import EmissionFactorRegistry, FactorLike
from emissions_engine.row_processor import RowOutcome, RowProcessor

logger = logging.getLogger(__name__)

__all__ = [
    "EmissionsCalculator",
    "get_default_calculator",
    "reset_default_calculator",
]


class EmissionsCalculator:
    """Calculation orchestrator over an injectable factor registry.

    Attributes:
        config: EmissionsEngineConfig instance.
        registry: Emission factor registry read by every calculation.
        matcher: Activity matcher over ``registry``.
        processor: Row processor.
        insights: Warning and recommendation generator.

    Example:
        >>> calculator = EmissionsCalculator(EmissionFactorRegistry())
        >>> calculator.calculate_emissions([]).summary.total_rows
        0
    """

    def __init__(
        self,
        registry: Optional[EmissionFactorRegistry] = None,
        config: Optional[EmissionsEngineConfig] = None,
        extractor: Optional[FieldExtractor] = None,
    ) -> None:
        """Initialise the calculator.

        Args:
            registry: Factor registry. If None, a registry with the default
                catalog is created, extended with ``config.factors_path``
                when that is set.
            config: Engine configuration. Uses the global config if None.
            extractor: Field extractor. Defaults to FieldExtractor().
        """
        self.config = config or get_config()
        if registry is None:
            registry = EmissionFactorRegistry()
            if self.config.factors_path:
                registry.load_file(self.config.factors_path)
        self.registry = registry

        self.matcher = ActivityMatcher(self.registry, self.config)
        self.processor = RowProcessor(self.matcher, extractor)
        self.insights = InsightGenerator(self.config)

        self._lock = threading.Lock()
        self._stats: Dict[str, Any] = {
            "calculations": 0,
            "rows_processed": 0,
            "rows_skipped": 0,
            "total_emissions": 0.0,
        }

        if self.config.enable_metrics:
            update_registry_size(len(self.registry))

        logger.info(
            "EmissionsCalculator initialised: factors=%d, default_region=%s",
            len(self.registry), self.config.default_region,
        )

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate_emissions(
        self,
        rows: Optional[Iterable[Any]],
        region: Optional[str] = None,
    ) -> CalculationResult:
        """Calculate emissions for a sequence of row records.

        Args:
            rows: Row records (mappings of column name to scalar value) in
                input order. None is treated as no rows.
            region: Preferred emission factor region. Defaults to
                ``config.default_region``.

        Returns:
            CalculationResult for the rows.
        """
        start = time.monotonic()
        region = region or self.config.default_region
        row_list = list(rows) if rows is not None else []

        outcomes = self._process_rows(row_list, region)

        points: List[ProcessedDataPoint] = []
        rejections: List[RowRejection] = []
        for outcome in outcomes:
            if isinstance(outcome, RowRejection):
                rejections.append(outcome)
            else:
                points.append(outcome)

        breakdown, category_breakdown = aggregate(points)
        total_emissions = round_half_up(sum(p.emissions for p in points))
        average_confidence = (
            sum(p.confidence for p in points) / len(points) if points else 0.0
        )

        warnings = self.insights.generate_warnings(
            rejections, len(row_list), average_confidence,
        )
        recommendations = self.insights.generate_recommendations(
            category_breakdown,
        )

        result = CalculationResult(
            total_emissions=total_emissions,
            breakdown=breakdown,
            category_breakdown=category_breakdown,
            confidence=average_confidence,
            warnings=warnings,
            recommendations=recommendations,
            processed_data=points,
            summary=CalculationSummary(
                total_rows=len(row_list),
                processed_rows=len(points),
                skipped_rows=len(rejections),
                categories=len(category_breakdown),
                average_confidence=average_confidence,
            ),
            rejections=rejections,
            region=region,
        )

        elapsed = time.monotonic() - start
        self._record(result, elapsed)
        logger.info(
            "Calculated %.2f kgCO2e for region=%s: %d/%d rows processed, "
            "confidence=%.3f (%.1f ms)",
            result.total_emissions, region, len(points), len(row_list),
            average_confidence, elapsed * 1000,
        )
        return result

    # ------------------------------------------------------------------
    # Registry access
    # ------------------------------------------------------------------

    def add_custom_factor(self, factor: FactorLike) -> EmissionFactor:
        """Append a custom factor to the registry.

        Must not be called while a calculation on the same registry is in
        flight.

        Raises:
            FactorRegistryError: If the entry is invalid.
        """
        entry = self.registry.add(factor)
        if self.config.enable_metrics:
            update_registry_size(len(self.registry))
        return entry

    def get_available_factors(
        self,
        region: Optional[str] = None,
    ) -> List[EmissionFactor]:
        """Return the factors of ``region`` (default region if None) plus Global ones."""
        return self.registry.available_factors(
            region or self.config.default_region,
        )

    def get_statistics(self) -> Dict[str, Any]:
        """Return running totals over all calculations of this instance."""
        with self._lock:
            stats = dict(self._stats)
        stats["registry_factors"] = len(self.registry)
        stats["matcher"] = self.matcher.get_statistics()
        return stats

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _process_rows(self, rows: List[Any], region: str) -> List[RowOutcome]:
        threshold = self.config.parallel_row_threshold
        workers = self.config.worker_count
        if threshold > 0 and len(rows) >= threshold and workers > 1:
            logger.debug(
                "Processing %d rows on %d worker threads", len(rows), workers,
            )
            with ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(
                    lambda item: self.processor.process(item[1], item[0], region),
                    enumerate(rows),
                ))
        return [
            self.processor.process(row, index, region)
            for index, row in enumerate(rows)
        ]

    def _record(self, result: CalculationResult, elapsed: float) -> None:
        with self._lock:
            self._stats["calculations"] += 1
            self._stats["rows_processed"] += result.summary.processed_rows
            self._stats["rows_skipped"] += result.summary.skipped_rows
            self._stats["total_emissions"] += result.total_emissions

        if not self.config.enable_metrics:
            return
        record_calculation(result.region, elapsed)
        for point in result.processed_data:
            record_row_processed(point.category, point.emissions)
            record_match_confidence(point.confidence)
        for rejection in result.rejections:
            record_row_skipped(rejection.reason.value)


# ---------------------------------------------------------------------------
# Default instance
# ---------------------------------------------------------------------------

_default_lock = threading.Lock()
_default_calculator: Optional[EmissionsCalculator] = None


def get_default_calculator() -> EmissionsCalculator:
    """Return the shared calculator over the default registry.

    Returns:
        EmissionsCalculator singleton built from the global config.
    """
    global _default_calculator
    if _default_calculator is None:
        with _default_lock:
            if _default_calculator is None:
                _default_calculator = EmissionsCalculator()
    return _default_calculator


def reset_default_calculator() -> None:
    """Drop the shared calculator (primarily for test teardown)."""
    global _default_calculator
    with _default_lock:
        _default_calculator = None
