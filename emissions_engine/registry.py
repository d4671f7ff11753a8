# -*- coding: utf-8 -*-
"""
Emission Factor Registry

Ordered, append-only catalog of known activities and their emission
intensities (kg CO2e per unit). Registry order is significant: the
activity matcher breaks score ties in favour of the entry added first, so
entries are never reordered or removed.

Supports:
    - Built-in default catalog (energy, transport, waste, industrial,
      agriculture)
    - Runtime extension with custom entries (``add`` / ``extend``)
    - Loading extra entries from JSON or YAML catalog files
    - Exact-activity lookup across or within regions
    - Region-specific override resolution
    - Region-filtered listing of available factors

The registry is read-mostly: ``add`` must not run concurrently with a
calculation that reads the same instance. Readers iterate over a snapshot
tuple, so an ``add`` never affects results already produced.

Example:
    >>> from emissions_engine.registry import EmissionFactorRegistry
    >>> registry = EmissionFactorRegistry()
    >>> [f.region for f in registry.lookup("electricity")]
    ['US', 'EU']
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from emissions_engine.exceptions import ConfigurationError, FactorRegistryError
from emissions_engine.models import GLOBAL_REGION, EmissionFactor, canonical_activity

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_EMISSION_FACTORS",
    "EmissionFactorRegistry",
]

FactorLike = Union[EmissionFactor, Dict[str, Any]]


# ---------------------------------------------------------------------------
# Default catalog (order matters for tie-breaking)
# ---------------------------------------------------------------------------

_DEFAULT_FACTOR_DATA: Tuple[Dict[str, Any], ...] = (
    # === Energy: electricity ===
    {"factor_id": "electricity_grid_us", "activity": "electricity",
     "category": "Energy", "factor": 0.4, "unit": "kWh",
     "source": "EPA eGRID 2022", "region": "US", "year": 2022},
    {"factor_id": "electricity_grid_eu", "activity": "electricity",
     "category": "Energy", "factor": 0.3, "unit": "kWh",
     "source": "EEA 2022", "region": "EU", "year": 2022},
    {"factor_id": "electricity_renewable", "activity": "renewable electricity",
     "category": "Energy", "factor": 0.05, "unit": "kWh",
     "source": "IPCC 2014", "region": "Global", "year": 2014},
    # === Energy: fuels ===
    {"factor_id": "natural_gas", "activity": "natural gas",
     "category": "Energy", "factor": 2.0, "unit": "m³",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "heating_oil", "activity": "heating oil",
     "category": "Energy", "factor": 2.7, "unit": "liter",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "coal", "activity": "coal",
     "category": "Energy", "factor": 2.4, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "propane", "activity": "propane",
     "category": "Energy", "factor": 1.5, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    # === Transport: road ===
    {"factor_id": "petrol_car", "activity": "petrol car",
     "category": "Transport", "factor": 0.18, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    {"factor_id": "diesel_car", "activity": "diesel car",
     "category": "Transport", "factor": 0.17, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    {"factor_id": "electric_car", "activity": "electric car",
     "category": "Transport", "factor": 0.05, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    {"factor_id": "hybrid_car", "activity": "hybrid car",
     "category": "Transport", "factor": 0.12, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    {"factor_id": "motorcycle", "activity": "motorcycle",
     "category": "Transport", "factor": 0.11, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    {"factor_id": "bus", "activity": "bus",
     "category": "Transport", "factor": 0.08, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    # === Transport: rail ===
    {"factor_id": "train_electric", "activity": "electric train",
     "category": "Transport", "factor": 0.04, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    {"factor_id": "train_diesel", "activity": "diesel train",
     "category": "Transport", "factor": 0.06, "unit": "km",
     "source": "DEFRA 2023", "region": "UK", "year": 2023},
    # === Transport: aviation ===
    {"factor_id": "flight_domestic", "activity": "domestic flight",
     "category": "Transport", "factor": 0.25, "unit": "km",
     "source": "DEFRA 2023", "region": "Global", "year": 2023},
    {"factor_id": "flight_short_haul", "activity": "short haul flight",
     "category": "Transport", "factor": 0.15, "unit": "km",
     "source": "DEFRA 2023", "region": "Global", "year": 2023},
    {"factor_id": "flight_long_haul", "activity": "long haul flight",
     "category": "Transport", "factor": 0.12, "unit": "km",
     "source": "DEFRA 2023", "region": "Global", "year": 2023},
    # === Transport: shipping ===
    {"factor_id": "ferry", "activity": "ferry",
     "category": "Transport", "factor": 0.11, "unit": "km",
     "source": "DEFRA 2023", "region": "Global", "year": 2023},
    {"factor_id": "cargo_ship", "activity": "cargo ship",
     "category": "Transport", "factor": 0.01, "unit": "tonne-km",
     "source": "IMO 2020", "region": "Global", "year": 2020},
    # === Waste ===
    {"factor_id": "landfill_waste", "activity": "landfill waste",
     "category": "Waste", "factor": 0.5, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "recycled_waste", "activity": "recycled waste",
     "category": "Waste", "factor": 0.1, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "composted_waste", "activity": "composted waste",
     "category": "Waste", "factor": 0.05, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "incinerated_waste", "activity": "incinerated waste",
     "category": "Waste", "factor": 0.3, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    # === Industrial processes ===
    {"factor_id": "cement_production", "activity": "cement production",
     "category": "Industrial", "factor": 0.9, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "steel_production", "activity": "steel production",
     "category": "Industrial", "factor": 2.3, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    {"factor_id": "aluminum_production", "activity": "aluminum production",
     "category": "Industrial", "factor": 11.5, "unit": "kg",
     "source": "IPCC 2006", "region": "Global", "year": 2006},
    # === Agriculture ===
    {"factor_id": "beef_production", "activity": "beef production",
     "category": "Agriculture", "factor": 60.0, "unit": "kg",
     "source": "FAO 2019", "region": "Global", "year": 2019},
    {"factor_id": "dairy_production", "activity": "dairy production",
     "category": "Agriculture", "factor": 3.2, "unit": "liter",
     "source": "FAO 2019", "region": "Global", "year": 2019},
    {"factor_id": "rice_production", "activity": "rice production",
     "category": "Agriculture", "factor": 2.5, "unit": "kg",
     "source": "FAO 2019", "region": "Global", "year": 2019},
)

DEFAULT_EMISSION_FACTORS: Tuple[EmissionFactor, ...] = tuple(
    EmissionFactor(**data) for data in _DEFAULT_FACTOR_DATA
)


# ---------------------------------------------------------------------------
# EmissionFactorRegistry
# ---------------------------------------------------------------------------


class EmissionFactorRegistry:
    """Append-only, ordered emission factor catalog.

    Attributes:
        _factors: Entries in insertion order.
        _lock: Serialises writers.

    Example:
        >>> registry = EmissionFactorRegistry()
        >>> registry.add({"activity": "biogas", "category": "Energy",
        ...               "factor": 0.2, "unit": "m³"})
        >>> registry.lookup("biogas")[0].factor
        0.2
    """

    def __init__(
        self,
        factors: Optional[Iterable[FactorLike]] = None,
    ) -> None:
        """Initialise the registry.

        Args:
            factors: Initial entries. ``None`` installs the built-in
                default catalog; pass an empty list for an empty registry.
        """
        self._factors: List[EmissionFactor] = []
        self._lock = threading.Lock()

        initial = DEFAULT_EMISSION_FACTORS if factors is None else factors
        self.extend(initial)

        logger.info(
            "EmissionFactorRegistry initialised: factors=%d, regions=%d",
            len(self._factors), len(self.regions()),
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        include_defaults: bool = True,
    ) -> EmissionFactorRegistry:
        """Build a registry from a JSON or YAML catalog file.

        Args:
            path: Catalog file path (.json, .yaml or .yml).
            include_defaults: Start from the default catalog and append
                the file's entries after it.

        Returns:
            New EmissionFactorRegistry.
        """
        registry = cls(None if include_defaults else [])
        registry.load_file(path)
        return registry

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, factor: FactorLike) -> EmissionFactor:
        """Append one entry.

        Args:
            factor: EmissionFactor or a mapping of its fields.

        Returns:
            The validated EmissionFactor that was appended.

        Raises:
            FactorRegistryError: If the entry is invalid (for example a
                non-positive factor or empty activity).
        """
        entry = self._validate(factor)
        with self._lock:
            self._factors.append(entry)
        logger.debug(
            "Added emission factor: %s (%s, %s) = %.4f kgCO2e/%s",
            entry.factor_id or entry.activity, entry.activity,
            entry.region, entry.factor, entry.unit,
        )
        return entry

    def extend(self, factors: Iterable[FactorLike]) -> int:
        """Append several entries, all or nothing.

        Args:
            factors: Entries to append, in order.

        Returns:
            Number of entries appended.

        Raises:
            FactorRegistryError: If any entry is invalid; nothing is
                appended in that case.
        """
        entries = [self._validate(f) for f in factors]
        with self._lock:
            self._factors.extend(entries)
        return len(entries)

    def load_file(self, path: Union[str, Path]) -> int:
        """Append the entries of a JSON or YAML catalog file.

        The file holds either a list of factor mappings or a mapping with a
        ``factors`` list.

        Args:
            path: Catalog file path.

        Returns:
            Number of entries appended.

        Raises:
            ConfigurationError: If the file extension is not supported.
            FactorRegistryError: If the file cannot be read or holds an
                invalid entry.
        """
        file_path = Path(path)
        suffix = file_path.suffix.lower()
        if suffix not in (".json", ".yaml", ".yml"):
            raise ConfigurationError(
                f"Unsupported factor catalog format: {suffix or '<none>'}",
                context={"path": str(file_path)},
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise FactorRegistryError(
                f"Could not read factor catalog: {e}",
                source_path=str(file_path),
            ) from e

        if isinstance(data, dict):
            data = data.get("factors", [])
        if not isinstance(data, list):
            raise FactorRegistryError(
                "Factor catalog must be a list of entries",
                context={"type": type(data).__name__},
                source_path=str(file_path),
            )

        count = self.extend(data)
        logger.info("Loaded %d emission factors from %s", count, file_path)
        return count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def factors(self) -> Tuple[EmissionFactor, ...]:
        """Snapshot of all entries in registry order."""
        return tuple(self._factors)

    def lookup(
        self,
        text: str,
        region: Optional[str] = None,
    ) -> List[EmissionFactor]:
        """Return the entries whose canonical activity equals ``text``.

        Args:
            text: Activity phrase; compared in canonical form
                (lowercase, punctuation as spaces, whitespace collapsed).
            region: Restrict to entries of exactly this region.

        Returns:
            Matching entries in registry order (possibly empty).
        """
        key = canonical_activity(text)
        return [
            f for f in self.factors
            if f.activity == key and (region is None or f.region == region)
        ]

    def find_regional(
        self,
        activity: str,
        region: str,
    ) -> Optional[EmissionFactor]:
        """Return the first entry for ``activity`` in exactly ``region``."""
        matches = self.lookup(activity, region=region)
        return matches[0] if matches else None

    def available_factors(
        self,
        region: str = GLOBAL_REGION,
    ) -> List[EmissionFactor]:
        """Return entries for ``region`` plus all Global entries."""
        return [
            f for f in self.factors
            if f.region == region or f.region == GLOBAL_REGION
        ]

    def regions(self) -> List[str]:
        """Return the distinct regions in first-seen order."""
        seen: Dict[str, None] = {}
        for f in self.factors:
            seen.setdefault(f.region, None)
        return list(seen)

    def __iter__(self) -> Iterator[EmissionFactor]:
        return iter(self.factors)

    def __len__(self) -> int:
        return len(self._factors)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(factor: FactorLike) -> EmissionFactor:
        if isinstance(factor, EmissionFactor):
            return factor
        if not isinstance(factor, dict):
            raise FactorRegistryError(
                "Emission factor entry must be a mapping",
                context={"entry": repr(factor)},
            )
        try:
            return EmissionFactor(**factor)
        except ValidationError as e:
            raise FactorRegistryError(
                "Invalid emission factor entry",
                context={"entry": factor, "errors": e.errors(include_url=False)},
            ) from e
