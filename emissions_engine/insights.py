# -*- coding: utf-8 -*-
"""
Insight Generator

Derives data-quality warnings and emission reduction recommendations from
the aggregate results of one calculation.

Warnings, in order:
    1. One per rejected row: ``Row {n}: {reason}`` (n is 1-based)
    2. Skipped-rows warning when skipped rows exceed 10% of all rows
    3. Low-confidence warning when average confidence is below 0.7

Recommendations, in order:
    1. One per category whose share of total emissions exceeds 30%, for
       the five known categories only
    2. Offset purchase when total emissions exceed 10,000 kg CO2e
    3. A generic encouragement when no other rule fired, so the list is
       never empty

Thresholds come from EmissionsEngineConfig; the defaults are the values
listed above.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from emissions_engine.aggregator import round_half_up
from emissions_engine.config import EmissionsEngineConfig, get_config
from emissions_engine.models import EmissionCategory, RowRejection

logger = logging.getLogger(__name__)

__all__ = [
    "CATEGORY_RECOMMENDATIONS",
    "OFFSET_RECOMMENDATION",
    "LOW_EMISSIONS_RECOMMENDATION",
    "SKIPPED_ROWS_WARNING",
    "LOW_CONFIDENCE_WARNING",
    "InsightGenerator",
]


CATEGORY_RECOMMENDATIONS: Dict[str, str] = {
    EmissionCategory.ENERGY.value: (
        "Energy accounts for {pct:.1f}% of emissions. "
        "Consider switching to renewable energy sources."
    ),
    EmissionCategory.TRANSPORT.value: (
        "Transport accounts for {pct:.1f}% of emissions. "
        "Consider electric vehicles or public transport."
    ),
    EmissionCategory.WASTE.value: (
        "Waste accounts for {pct:.1f}% of emissions. "
        "Implement better recycling and waste reduction programs."
    ),
    EmissionCategory.INDUSTRIAL.value: (
        "Industrial processes account for {pct:.1f}% of emissions. "
        "Look into process optimization and cleaner technologies."
    ),
    EmissionCategory.AGRICULTURE.value: (
        "Agriculture accounts for {pct:.1f}% of emissions. "
        "Consider sustainable farming practices."
    ),
}

OFFSET_RECOMMENDATION = (
    "Consider purchasing carbon offsets to achieve carbon neutrality."
)

LOW_EMISSIONS_RECOMMENDATION = (
    "Great job! Your emissions are relatively low. Continue monitoring "
    "and look for further reduction opportunities."
)

SKIPPED_ROWS_WARNING = "{skipped} rows were skipped due to insufficient data"

LOW_CONFIDENCE_WARNING = (
    "Low confidence in calculations due to unclear activity descriptions"
)


class InsightGenerator:
    """Warning and recommendation rules over aggregate results."""

    def __init__(self, config: Optional[EmissionsEngineConfig] = None) -> None:
        self.config = config or get_config()

    def generate_warnings(
        self,
        rejections: Sequence[RowRejection],
        total_rows: int,
        average_confidence: float,
    ) -> List[str]:
        """Build the ordered warning list.

        Args:
            rejections: Skipped rows in input order.
            total_rows: Number of input rows.
            average_confidence: Mean confidence of the processed points.

        Returns:
            Warning strings.
        """
        warnings = [rejection.to_warning() for rejection in rejections]

        skipped_rows = len(rejections)
        if skipped_rows > total_rows * self.config.skipped_rows_warning_ratio:
            warnings.append(SKIPPED_ROWS_WARNING.format(skipped=skipped_rows))

        if average_confidence < self.config.low_confidence_threshold:
            warnings.append(LOW_CONFIDENCE_WARNING)

        return warnings

    def generate_recommendations(
        self,
        category_breakdown: Mapping[str, float],
    ) -> List[str]:
        """Build the ordered recommendation list.

        Shares are computed against the sum of the rounded category
        buckets and printed rounded half-up to one decimal.

        Args:
            category_breakdown: Emissions per category.

        Returns:
            Recommendation strings; never empty.
        """
        recommendations: List[str] = []
        total = sum(category_breakdown.values())

        if total > 0:
            threshold = self.config.category_share_threshold_pct
            for category, emissions in category_breakdown.items():
                percentage = emissions / total * 100
                template = CATEGORY_RECOMMENDATIONS.get(category)
                if percentage > threshold and template is not None:
                    recommendations.append(
                        template.format(pct=round_half_up(percentage, 1)),
                    )

        if total > self.config.offset_threshold_kg:
            recommendations.append(OFFSET_RECOMMENDATION)

        if not recommendations:
            recommendations.append(LOW_EMISSIONS_RECOMMENDATION)

        logger.debug(
            "Generated %d recommendations for total=%.2f kgCO2e",
            len(recommendations), total,
        )
        return recommendations
