# -*- coding: utf-8 -*-
"""
Aggregator

Reduces processed data points into per-activity and per-category emission
totals. Each bucket is rounded to 2 decimal places on its own, so the sum
of the buckets can differ from the rounded grand total by a few
hundredths.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Tuple

from emissions_engine.models import ProcessedDataPoint

__all__ = ["round_half_up", "aggregate", "sum_by"]


def round_half_up(value: float, digits: int = 2) -> float:
    """Round to ``digits`` decimals with halves going toward +infinity.

    Python's ``round`` uses banker's rounding; emission totals are
    reported with halves rounded up.
    """
    if not math.isfinite(value):
        return value
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def sum_by(
    points: Iterable[ProcessedDataPoint],
    key: str,
) -> Dict[str, float]:
    """Sum point emissions grouped by the ``key`` attribute, rounding each bucket.

    Args:
        points: Processed data points.
        key: Attribute to group by ("activity" or "category").

    Returns:
        Mapping of group value to rounded emissions, in first-seen order.
    """
    totals: Dict[str, float] = {}
    for point in points:
        bucket = getattr(point, key)
        totals[bucket] = totals.get(bucket, 0.0) + point.emissions
    return {bucket: round_half_up(value) for bucket, value in totals.items()}


def aggregate(
    points: Iterable[ProcessedDataPoint],
) -> Tuple[Dict[str, float], Dict[str, float]]:
    """Return ``(breakdown, category_breakdown)`` for the given points."""
    points = list(points)
    return sum_by(points, "activity"), sum_by(points, "category")
