"""
Unit tests for filtration settings.
"""

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from rail_filtration.conf import (
    FiltrationSettings,
    check_settings,
    get_filtration_settings,
    validate_settings,
)
from rail_filtration.defaults import DEFAULT_PARAMETERS, LIBRARY_DEFAULTS, merge_settings

pytestmark = pytest.mark.unit


class TestFiltrationSettings:
    def test_defaults(self):
        config = FiltrationSettings.from_dict(None)
        assert config.parameters == DEFAULT_PARAMETERS
        assert config.accepted_search_conditions == ["=", "like"]
        assert config.default_sort_direction == "asc"
        assert config.list_separator == ";"
        assert validate_settings(config) == []

    def test_parameter_overrides_merge_with_defaults(self):
        config = FiltrationSettings.from_dict({"parameters": {"search": "q"}})
        assert config.parameter("search") == "q"
        assert config.parameter("order_by") == "orderBy"

    def test_unknown_keys_are_ignored(self):
        config = FiltrationSettings.from_dict({"unknown": True})
        assert not hasattr(config, "unknown")

    def test_merge_does_not_mutate_defaults(self):
        merge_settings(LIBRARY_DEFAULTS, {"parameters": {"search": "q"}})
        assert LIBRARY_DEFAULTS["parameters"]["search"] == "search"

    def test_from_django_settings(self):
        with override_settings(RAIL_FILTRATION={"default_sort_direction": "desc"}):
            assert get_filtration_settings().default_sort_direction == "desc"


class TestValidation:
    def test_invalid_values_are_reported(self):
        config = FiltrationSettings.from_dict(
            {
                "parameters": {"search": "orderBy", "bogus": "x"},
                "accepted_search_conditions": ["=", "regex"],
                "default_sort_direction": "up",
                "list_separator": "",
            }
        )
        errors = validate_settings(config)
        assert len(errors) == 5
        assert any("bogus" in error for error in errors)
        assert any("unique" in error for error in errors)
        assert any("regex" in error for error in errors)

    def test_check_settings_raises(self):
        with override_settings(RAIL_FILTRATION={"default_sort_direction": "up"}):
            with pytest.raises(ImproperlyConfigured):
                check_settings()

    def test_check_settings_returns_config(self):
        assert isinstance(check_settings(), FiltrationSettings)
