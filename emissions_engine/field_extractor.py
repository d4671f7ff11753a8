# -*- coding: utf-8 -*-
"""
Field Extractor

Recovers the four logical fields of an activity record (activity
description, quantity, date, location) from a loosely structured row whose
column names and value types are not known in advance.

Each field is resolved by a cascade of strategies applied per candidate
column name, in candidate order:

    1. Direct key match
    2. Case-insensitive key match
    3. Partial match (key contains candidate or candidate contains key)

The first column found for a candidate is the only one considered for that
candidate; if its value is unusable the next candidate is tried. When no
candidate yields a value, activity and amount fall back to scanning every
column in row order.

Extraction never raises. Missing activity or amount is reported as ``None``
on the returned ExtractedFields.

Example:
    >>> from emissions_engine.field_extractor import FieldExtractor
    >>> extractor = FieldExtractor()
    >>> fields = extractor.extract({"Activity": "Natural Gas", "Amount": "120"})
    >>> fields.activity, fields.amount
    ('natural gas', 120.0)
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from numbers import Number
from typing import Any, Optional, Sequence

from emissions_engine.models import ExtractedFields

logger = logging.getLogger(__name__)

__all__ = [
    "ACTIVITY_FIELDS",
    "AMOUNT_FIELDS",
    "DATE_FIELDS",
    "LOCATION_FIELDS",
    "FieldExtractor",
    "parse_number",
    "parse_date",
]


# ---------------------------------------------------------------------------
# Candidate column names (order is significant)
# ---------------------------------------------------------------------------

ACTIVITY_FIELDS: Sequence[str] = (
    "activity", "type", "category", "description", "item", "service",
    "fuel_type", "transport_mode", "energy_source", "waste_type",
)

AMOUNT_FIELDS: Sequence[str] = (
    "amount", "quantity", "value", "volume", "distance", "consumption",
    "usage", "kwh", "liters", "litres", "km", "miles", "kg", "tonnes",
)

DATE_FIELDS: Sequence[str] = (
    "date", "timestamp", "time", "created_at", "occurred_at",
)

LOCATION_FIELDS: Sequence[str] = (
    "location", "country", "region", "city", "site", "facility",
)

# Minimum stripped length for a free-text column to count as an activity
# in the fallback scan.
_MIN_FALLBACK_ACTIVITY_LENGTH = 3

_MISSING = object()

_THOUSANDS_PATTERN = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")

# Date parse formats to try in order
_DATE_FORMATS: Sequence[str] = (
    "%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d",
    "%m/%d/%Y", "%d/%m/%Y", "%m-%d-%Y", "%d-%m-%Y",
    "%m.%d.%Y", "%d.%m.%Y",
    "%m/%d/%y", "%d/%m/%y",
    "%B %d, %Y", "%b %d, %Y", "%B %d %Y", "%b %d %Y",
    "%d %B %Y", "%d %b %Y",
    "%d-%b-%Y", "%d-%b-%y",
    "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M",
    "%Y%m%d",
)


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def parse_number(value: Any) -> Optional[float]:
    """Parse a scalar into a finite float.

    Accepts ints, floats and numeric strings (surrounding whitespace and
    thousands separators allowed). Booleans, empty strings, NaN and
    infinities are not numbers.

    Args:
        value: Raw cell value.

    Returns:
        The parsed float, or None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Number):
        try:
            result = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return result if math.isfinite(result) else None
    if not isinstance(value, str):
        return None

    cleaned = value.strip()
    if not cleaned or "_" in cleaned:
        return None
    if _THOUSANDS_PATTERN.match(cleaned):
        cleaned = cleaned.replace(",", "")
    try:
        result = float(cleaned)
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a scalar into a datetime.

    ``datetime`` and ``date`` objects are passed through; strings are tried
    against the known formats in order, then as ISO 8601.

    Args:
        value: Raw cell value.

    Returns:
        Parsed datetime or None if unparseable.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    cleaned = value.strip()
    if not cleaned:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError:
        return None


def _is_numeric_string(value: str) -> bool:
    return parse_number(value) is not None


# ---------------------------------------------------------------------------
# FieldExtractor
# ---------------------------------------------------------------------------


class FieldExtractor:
    """Heuristic extraction of typed fields from arbitrary row records.

    Candidate name lists can be overridden per instance; the defaults are
    ACTIVITY_FIELDS, AMOUNT_FIELDS, DATE_FIELDS and LOCATION_FIELDS.
    """

    def __init__(
        self,
        activity_fields: Sequence[str] = ACTIVITY_FIELDS,
        amount_fields: Sequence[str] = AMOUNT_FIELDS,
        date_fields: Sequence[str] = DATE_FIELDS,
        location_fields: Sequence[str] = LOCATION_FIELDS,
    ) -> None:
        self.activity_fields = tuple(activity_fields)
        self.amount_fields = tuple(amount_fields)
        self.date_fields = tuple(date_fields)
        self.location_fields = tuple(location_fields)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, row: Any) -> ExtractedFields:
        """Extract all four logical fields from a row.

        Args:
            row: Mapping of column name to raw value. Anything else is
                treated as an empty record.

        Returns:
            ExtractedFields; absent fields are None.
        """
        return ExtractedFields(
            activity=self.extract_activity(row),
            amount=self.extract_amount(row),
            date=self.extract_date(row),
            location=self.extract_location(row),
        )

    def extract_activity(self, row: Any) -> Optional[str]:
        """Return the lowercased, trimmed activity description or None."""
        if not isinstance(row, Mapping):
            return None

        for field in self.activity_fields:
            value = self.find_field_value(row, field)
            if isinstance(value, str) and value.strip():
                return value.strip().lower()

        # Fallback: first free-text column
        for value in row.values():
            if (
                isinstance(value, str)
                and len(value.strip()) >= _MIN_FALLBACK_ACTIVITY_LENGTH
                and not _is_numeric_string(value)
            ):
                return value.strip().lower()

        return None

    def extract_amount(self, row: Any) -> Optional[float]:
        """Return the first strictly positive quantity or None."""
        if not isinstance(row, Mapping):
            return None

        for field in self.amount_fields:
            number = parse_number(self.find_field_value(row, field))
            if number is not None and number > 0:
                return number

        # Fallback: first positive numeric column
        for value in row.values():
            number = parse_number(value)
            if number is not None and number > 0:
                return number

        return None

    def extract_date(self, row: Any) -> Optional[datetime]:
        """Return the first parseable date or None."""
        if not isinstance(row, Mapping):
            return None

        for field in self.date_fields:
            value = self.find_field_value(row, field)
            if value is _MISSING or value is None or value == "":
                continue
            parsed = parse_date(value)
            if parsed is not None:
                return parsed

        return None

    def extract_location(self, row: Any) -> Optional[str]:
        """Return the first non-empty location string or None."""
        if not isinstance(row, Mapping):
            return None

        for field in self.location_fields:
            value = self.find_field_value(row, field)
            if isinstance(value, str) and value.strip():
                return value.strip()

        return None

    @staticmethod
    def find_field_value(row: Mapping, field_name: str) -> Any:
        """Find the value of the column matching ``field_name``.

        Tries a direct key match, then a case-insensitive match, then a
        partial match in either direction.

        Args:
            row: Row record.
            field_name: Candidate column name.

        Returns:
            The column value, or an internal sentinel when no column
            matches.
        """
        if field_name in row:
            return row[field_name]

        lower = field_name.lower()
        for key, value in row.items():
            if str(key).lower() == lower:
                return value

        for key, value in row.items():
            key_lower = str(key).lower()
            if lower in key_lower or key_lower in lower:
                return value

        return _MISSING
