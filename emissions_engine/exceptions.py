"""Emissions Engine Exception Hierarchy.

Exception Hierarchy:
    EmissionsEngineException (base)
    ├── FactorRegistryError
    └── ConfigurationError

Row-level problems during a calculation are never raised; they are reported
as ``RowRejection`` values on the result. These exceptions cover the
caller-driven operations around a calculation: extending the factor registry
and loading factor catalogs or row files.

All exceptions include rich context:
- error_code: Unique error identifier
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from emissions_engine.exceptions import FactorRegistryError
    >>> raise FactorRegistryError(
    ...     message="Emission factor must be positive",
    ...     context={"activity": "coal", "factor": 0},
    ... )
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class EmissionsEngineException(Exception):
    """Base exception for all emissions engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "EE_FACTOR_REGISTRY_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "EE"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "EE_FACTOR_REGISTRY_ERROR"
        """
        class_name = self.__class__.__name__
        # CamelCase -> SCREAMING_SNAKE_CASE
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', class_name).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary with all error details
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


# ==============================================================================
# Registry Exceptions
# ==============================================================================

class FactorRegistryError(EmissionsEngineException):
    """An emission factor could not be added to or loaded into the registry.

    Example:
        >>> raise FactorRegistryError(
        ...     message="Invalid emission factor entry",
        ...     context={"entry": {"activity": "coal", "factor": -1}},
        ...     source_path="factors.yaml",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        source_path: Optional[str] = None,
    ):
        """Initialize registry error.

        Args:
            message: Error message
            context: Error context
            source_path: Catalog file being loaded, if any
        """
        context = context or {}
        if source_path:
            context["source_path"] = source_path
        super().__init__(message, context=context)


class ConfigurationError(EmissionsEngineException):
    """Unsupported or invalid configuration, such as an unknown file format."""


__all__ = [
    "EmissionsEngineException",
    "FactorRegistryError",
    "ConfigurationError",
]
