# -*- coding: utf-8 -*-
"""
Emissions Engine Data Models

Pydantic v2 data models for the emissions calculation engine.

Enumerations:
    - EmissionCategory: Known emission source categories
    - RejectionReason: Closed set of reasons a row can be skipped

Models:
    - EmissionFactor: Immutable reference entry of the factor registry
    - ExtractedFields: Logical fields recovered from one raw row
    - ActivityMatch: Best registry entry for an activity description
    - ProcessedDataPoint: One successfully processed input row
    - RowRejection: One skipped input row and why
    - CalculationSummary: Row counts and confidence for one calculation
    - CalculationResult: The engine's externally visible output

Result models serialize with camelCase aliases (``totalEmissions``,
``categoryBreakdown``, ...) for callers outside Python; construction and
attribute access use the snake_case field names.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


GLOBAL_REGION = "Global"

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def canonical_activity(text: Any) -> str:
    """Lowercase, replace non-alphanumerics with spaces, collapse spaces.

    Registry activities and matcher input share this form, so an input
    equal to an entry's activity always compares equal after it.
    """
    cleaned = _NON_ALNUM.sub(" ", str(text).lower())
    return _WHITESPACE.sub(" ", cleaned).strip()


# =============================================================================
# Enumerations
# =============================================================================


class EmissionCategory(str, Enum):
    """Known emission source categories.

    Registry entries may carry other category strings; only these five
    have templated reduction recommendations.
    """

    ENERGY = "Energy"
    TRANSPORT = "Transport"
    WASTE = "Waste"
    INDUSTRIAL = "Industrial"
    AGRICULTURE = "Agriculture"


class RejectionReason(str, Enum):
    """Why a row was skipped. This set is closed."""

    MISSING_ACTIVITY = "missing activity"
    MISSING_AMOUNT = "missing amount"
    NO_EMISSION_FACTOR = "no emission factor for activity"


# =============================================================================
# Registry models
# =============================================================================


class EmissionFactor(BaseModel):
    """Immutable emission factor registry entry.

    Attributes:
        factor_id: Stable identifier of the entry.
        activity: Canonical lowercase activity phrase.
        category: Emission category (see EmissionCategory; open string).
        factor: Emissions in kg CO2e per unit, strictly positive.
        unit: Activity unit the factor applies to (kWh, km, kg, ...).
        region: Region code the factor applies to, or "Global".
        year: Reference year of the factor.
        source: Citation of the publishing body and dataset.
    """

    factor_id: str = Field(default="", description="Stable entry identifier")
    activity: str = Field(..., description="Canonical lowercase activity phrase")
    category: str = Field(..., description="Emission category")
    factor: float = Field(
        ..., gt=0.0, allow_inf_nan=False, description="kg CO2e per unit",
    )
    unit: str = Field(..., description="Activity unit")
    region: str = Field(default=GLOBAL_REGION, description="Region code")
    year: int = Field(default=0, ge=0, description="Reference year")
    source: str = Field(default="", description="Citation string")

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("activity")
    @classmethod
    def validate_activity(cls, v: str) -> str:
        """Canonicalise the activity; reject empty phrases."""
        v = canonical_activity(v)
        if not v:
            raise ValueError("activity must be non-empty")
        return v

    @field_validator("category", "unit")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Validate category and unit are non-empty."""
        if not v or not v.strip():
            raise ValueError("value must be non-empty")
        return v.strip()

    @field_validator("region", mode="before")
    @classmethod
    def validate_region(cls, v: Any) -> str:
        """Default missing regions to Global."""
        if v is None or not str(v).strip():
            return GLOBAL_REGION
        return str(v).strip()


# =============================================================================
# Per-row models
# =============================================================================


class ExtractedFields(BaseModel):
    """Logical fields recovered from one raw row record.

    ``activity`` and ``amount`` are required for processing; their absence
    is reported as ``None`` rather than raised.
    """

    activity: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[datetime] = None
    location: Optional[str] = None

    model_config = {"frozen": True}


class ActivityMatch(BaseModel):
    """Result of matching an activity description against the registry.

    Attributes:
        factor: Registry entry that was selected.
        confidence: Match confidence in [0, 1] after any regional boost.
        score: Raw token-overlap score before any regional boost.
        canonical_activity: The selected entry's activity phrase.
        regional_override: True when a region-specific entry replaced the
            generic best match.
    """

    factor: EmissionFactor
    confidence: float = Field(..., ge=0.0, le=1.0)
    score: float = Field(..., ge=0.0, le=1.0)
    canonical_activity: str
    regional_override: bool = False

    model_config = {"frozen": True}


class ProcessedDataPoint(BaseModel):
    """One successfully processed input row.

    ``original_row`` is the caller's row object itself, held by reference
    and never modified.
    """

    original_row: Any = Field(..., description="Caller's raw row record")
    activity: str = Field(..., description="Canonical matched activity")
    category: str = Field(..., description="Category of the matched factor")
    amount: float = Field(..., gt=0.0, description="Extracted quantity")
    unit: str = Field(..., description="Unit of the matched factor")
    emission_factor: float = Field(..., gt=0.0, description="Applied factor")
    emissions: float = Field(..., ge=0.0, description="amount * factor, kg CO2e")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Match confidence")
    date: Optional[datetime] = Field(None, description="Activity date")
    location: Optional[str] = Field(None, description="Activity location")

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class RowRejection(BaseModel):
    """A skipped input row.

    Attributes:
        row_index: Zero-based position of the row in the input.
        reason: Why the row was skipped.
        detail: Extra context; the unmatched activity text for
            NO_EMISSION_FACTOR.
    """

    row_index: int = Field(..., ge=0)
    reason: RejectionReason
    detail: str = ""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @property
    def message(self) -> str:
        """Human readable rejection reason."""
        if self.reason is RejectionReason.NO_EMISSION_FACTOR:
            return f"{self.reason.value}: {self.detail}"
        return self.reason.value

    def to_warning(self) -> str:
        """Format as a result warning with a 1-based row number."""
        return f"Row {self.row_index + 1}: {self.message}"


# =============================================================================
# Result models
# =============================================================================


class CalculationSummary(BaseModel):
    """Row counts and confidence for one calculation."""

    total_rows: int = Field(default=0, ge=0)
    processed_rows: int = Field(default=0, ge=0)
    skipped_rows: int = Field(default=0, ge=0)
    categories: int = Field(default=0, ge=0, description="Distinct categories")
    average_confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class CalculationResult(BaseModel):
    """The engine's output for one ``calculate_emissions`` call.

    Attributes:
        total_emissions: Sum of all point emissions, rounded to 2 decimals.
        breakdown: Emissions per canonical activity, each rounded.
        category_breakdown: Emissions per category, each rounded.
        confidence: Mean point confidence, 0 when nothing was processed.
        warnings: Data-quality warnings in emission order.
        recommendations: Reduction recommendations; never empty.
        processed_data: Processed points in input order.
        summary: Row counts and average confidence.
        rejections: Skipped rows in input order.
        region: Region the calculation was run for.
    """

    total_emissions: float = Field(default=0.0, ge=0.0)
    breakdown: Dict[str, float] = Field(default_factory=dict)
    category_breakdown: Dict[str, float] = Field(default_factory=dict)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    warnings: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    processed_data: List[ProcessedDataPoint] = Field(default_factory=list)
    summary: CalculationSummary = Field(default_factory=CalculationSummary)
    rejections: List[RowRejection] = Field(default_factory=list)
    region: str = Field(default=GLOBAL_REGION)

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase, JSON-compatible form of the result."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "GLOBAL_REGION",
    "canonical_activity",
    "EmissionCategory",
    "RejectionReason",
    "EmissionFactor",
    "ExtractedFields",
    "ActivityMatch",
    "ProcessedDataPoint",
    "RowRejection",
    "CalculationSummary",
    "CalculationResult",
]
