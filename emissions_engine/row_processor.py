# -*- coding: utf-8 -*-
"""
Row Processor

Turns one raw row record into one ProcessedDataPoint, or rejects it with
exactly one of three reasons:

    - missing activity
    - missing amount
    - no emission factor for activity: <text>

Rows are independent of each other and the processor holds no per-row
state, so ``process`` may be called from several threads at once.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from emissions_engine.activity_matcher import ActivityMatcher
from emissions_engine.field_extractor import FieldExtractor
from emissions_engine.models import (
    GLOBAL_REGION,
    ProcessedDataPoint,
    RejectionReason,
    RowRejection,
)

logger = logging.getLogger(__name__)

__all__ = ["RowOutcome", "RowProcessor"]

RowOutcome = Union[ProcessedDataPoint, RowRejection]


class RowProcessor:
    """Extract, match and compute emissions for single rows."""

    def __init__(
        self,
        matcher: ActivityMatcher,
        extractor: Optional[FieldExtractor] = None,
    ) -> None:
        self.matcher = matcher
        self.extractor = extractor or FieldExtractor()

    def process(
        self,
        row: Any,
        row_index: int,
        region: str = GLOBAL_REGION,
    ) -> RowOutcome:
        """Process one row.

        Args:
            row: Raw row record (mapping of column name to value).
            row_index: Zero-based position of the row in the input.
            region: Preferred emission factor region.

        Returns:
            ProcessedDataPoint on success, RowRejection otherwise.
        """
        activity = self.extractor.extract_activity(row)
        if activity is None:
            return self._reject(row_index, RejectionReason.MISSING_ACTIVITY)

        amount = self.extractor.extract_amount(row)
        if amount is None:
            return self._reject(row_index, RejectionReason.MISSING_AMOUNT)

        match = self.matcher.match(activity, region=region)
        if match is None:
            return self._reject(
                row_index, RejectionReason.NO_EMISSION_FACTOR, detail=activity,
            )

        factor = match.factor
        return ProcessedDataPoint(
            original_row=row,
            activity=match.canonical_activity,
            category=factor.category,
            amount=amount,
            unit=factor.unit,
            emission_factor=factor.factor,
            emissions=amount * factor.factor,
            confidence=match.confidence,
            date=self.extractor.extract_date(row),
            location=self.extractor.extract_location(row),
        )

    @staticmethod
    def _reject(
        row_index: int,
        reason: RejectionReason,
        detail: str = "",
    ) -> RowRejection:
        rejection = RowRejection(row_index=row_index, reason=reason, detail=detail)
        logger.debug("Row %d rejected: %s", row_index + 1, rejection.message)
        return rejection
