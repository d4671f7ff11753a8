# -*- coding: utf-8 -*-
"""
Emissions Engine Configuration

Centralized configuration for the emissions calculation engine covering:
- Region defaults and regional override boost
- Data-quality warning thresholds
- Recommendation thresholds
- Parallel row processing
- Optional custom factor catalog
- Metrics and logging

All settings can be overridden via environment variables with the
``EMISSIONS_ENGINE_`` prefix (e.g. ``EMISSIONS_ENGINE_DEFAULT_REGION``).

Example:
    >>> from emissions_engine.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.default_region, cfg.low_confidence_threshold)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "EMISSIONS_ENGINE_"


# ---------------------------------------------------------------------------
# EmissionsEngineConfig
# ---------------------------------------------------------------------------


@dataclass
class EmissionsEngineConfig:
    """Complete configuration for the emissions calculation engine.

    Attributes:
        default_region: Region used when a caller does not select one.
        region_confidence_boost: Confidence added when a region-specific
            factor overrides the generic match.
        skipped_rows_warning_ratio: Fraction of skipped rows above which
            the aggregate skipped-rows warning is emitted.
        low_confidence_threshold: Average confidence below which the
            low-confidence warning is emitted.
        category_share_threshold_pct: Category share of total emissions
            (percent) above which a category recommendation is emitted.
        offset_threshold_kg: Total emissions (kg CO2e) above which the
            offset-purchase recommendation is emitted.
        parallel_row_threshold: Row count at or above which rows are
            processed on a thread pool. ``0`` disables parallelism.
        worker_count: Thread pool size for parallel row processing.
        factors_path: Optional JSON/YAML file of extra emission factors
            appended to the default registry.
        enable_metrics: Whether Prometheus metrics are recorded.
        log_level: Logging level for the ``emissions_engine`` logger.
    """

    # -- Regions -------------------------------------------------------------
    default_region: str = "Global"
    region_confidence_boost: float = 0.1

    # -- Warnings ------------------------------------------------------------
    skipped_rows_warning_ratio: float = 0.1
    low_confidence_threshold: float = 0.7

    # -- Recommendations -----------------------------------------------------
    category_share_threshold_pct: float = 30.0
    offset_threshold_kg: float = 10000.0

    # -- Parallel processing -------------------------------------------------
    parallel_row_threshold: int = 5000
    worker_count: int = 4

    # -- Registry ------------------------------------------------------------
    factors_path: str = ""

    # -- Observability -------------------------------------------------------
    enable_metrics: bool = True
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> EmissionsEngineConfig:
        """Build an EmissionsEngineConfig from environment variables.

        Every field can be overridden via ``EMISSIONS_ENGINE_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).
        Integer values are parsed via ``int()``.
        Float values are parsed via ``float()``.

        Returns:
            Populated EmissionsEngineConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _float(name: str, default: float) -> float:
            val = _env(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                logger.warning(
                    "Invalid float for %s%s=%s, using default %f",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        config = cls(
            default_region=_str("DEFAULT_REGION", cls.default_region),
            region_confidence_boost=_float(
                "REGION_CONFIDENCE_BOOST", cls.region_confidence_boost,
            ),
            skipped_rows_warning_ratio=_float(
                "SKIPPED_ROWS_WARNING_RATIO", cls.skipped_rows_warning_ratio,
            ),
            low_confidence_threshold=_float(
                "LOW_CONFIDENCE_THRESHOLD", cls.low_confidence_threshold,
            ),
            category_share_threshold_pct=_float(
                "CATEGORY_SHARE_THRESHOLD_PCT",
                cls.category_share_threshold_pct,
            ),
            offset_threshold_kg=_float(
                "OFFSET_THRESHOLD_KG", cls.offset_threshold_kg,
            ),
            parallel_row_threshold=_int(
                "PARALLEL_ROW_THRESHOLD", cls.parallel_row_threshold,
            ),
            worker_count=_int("WORKER_COUNT", cls.worker_count),
            factors_path=_str("FACTORS_PATH", cls.factors_path),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
            log_level=_str("LOG_LEVEL", cls.log_level),
        )

        logger.info(
            "EmissionsEngineConfig loaded: default_region=%s, "
            "low_confidence_threshold=%.2f, parallel_row_threshold=%d, "
            "worker_count=%d, metrics=%s",
            config.default_region,
            config.low_confidence_threshold,
            config.parallel_row_threshold,
            config.worker_count,
            config.enable_metrics,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton access
# ---------------------------------------------------------------------------

_config_instance: Optional[EmissionsEngineConfig] = None
_config_lock = threading.Lock()


def get_config() -> EmissionsEngineConfig:
    """Return the singleton EmissionsEngineConfig, creating from env if needed.

    Returns:
        EmissionsEngineConfig singleton instance.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = EmissionsEngineConfig.from_env()
    return _config_instance


def set_config(config: EmissionsEngineConfig) -> None:
    """Replace the singleton EmissionsEngineConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("EmissionsEngineConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "EmissionsEngineConfig",
    "get_config",
    "set_config",
    "reset_config",
]
