# -*- coding: utf-8 -*-
"""Tests for the emissions engine exception hierarchy."""

import json

import pytest

from emissions_engine.exceptions import (
    ConfigurationError,
    EmissionsEngineException,
    FactorRegistryError,
)


class TestExceptionHierarchy:
    """Test exception inheritance."""

    def test_subclasses(self):
        """Registry and configuration errors derive from the base."""
        assert issubclass(FactorRegistryError, EmissionsEngineException)
        assert issubclass(ConfigurationError, EmissionsEngineException)

    def test_catch_as_base(self):
        """Derived errors can be caught as the base exception."""
        with pytest.raises(EmissionsEngineException):
            raise ConfigurationError("bad format")


class TestEmissionsEngineException:
    """Test the base exception."""

    def test_generated_error_code(self):
        """Error codes are derived from the class name."""
        assert EmissionsEngineException("x").error_code == "EE_EMISSIONS_ENGINE_EXCEPTION"
        assert FactorRegistryError("x").error_code == "EE_FACTOR_REGISTRY_ERROR"
        assert ConfigurationError("x").error_code == "EE_CONFIGURATION_ERROR"

    def test_explicit_error_code(self):
        exc = EmissionsEngineException("x", error_code="EE_CUSTOM")
        assert exc.error_code == "EE_CUSTOM"

    def test_str_and_repr(self):
        exc = ConfigurationError("Unsupported factor catalog format: .csv")
        assert str(exc) == (
            "[EE_CONFIGURATION_ERROR] - Unsupported factor catalog format: .csv"
        )
        assert repr(exc).startswith("ConfigurationError(message=")

    def test_to_dict(self):
        exc = ConfigurationError("bad", context={"path": "rows.txt"})
        data = exc.to_dict()
        assert data["error_type"] == "ConfigurationError"
        assert data["error_code"] == "EE_CONFIGURATION_ERROR"
        assert data["message"] == "bad"
        assert data["context"] == {"path": "rows.txt"}
        assert "timestamp" in data

    def test_to_json(self):
        """to_json() returns parseable JSON."""
        exc = EmissionsEngineException("boom")
        assert json.loads(exc.to_json())["message"] == "boom"


class TestFactorRegistryError:
    """Test registry error context."""

    def test_source_path_in_context(self):
        exc = FactorRegistryError(
            "Invalid emission factor entry",
            context={"entry": {"activity": "coal"}},
            source_path="factors.yaml",
        )
        assert exc.context["source_path"] == "factors.yaml"
        assert exc.context["entry"] == {"activity": "coal"}

    def test_no_source_path(self):
        assert "source_path" not in FactorRegistryError("x").context
