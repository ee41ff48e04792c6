"""
FiltrationSettings implementation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.conf import settings as django_settings
from django.core.exceptions import ImproperlyConfigured

from ..defaults import DEFAULT_PARAMETERS, LIBRARY_DEFAULTS, merge_settings

SETTINGS_NAME = "RAIL_FILTRATION"
SEARCH_CONDITIONS = ("=", "like", "ilike")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass
class FiltrationSettings:
    """Settings for request parameter filtration."""

    parameters: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PARAMETERS))
    accepted_search_conditions: List[str] = field(default_factory=lambda: ["=", "like"])
    default_sort_direction: str = "asc"
    list_separator: str = ";"
    log_malformed_search: bool = False

    def parameter(self, name: str) -> str:
        """Return the query string key used for a logical parameter name."""
        return self.parameters.get(name, DEFAULT_PARAMETERS.get(name, name))

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "FiltrationSettings":
        merged = merge_settings(LIBRARY_DEFAULTS, payload or {})
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})

    @classmethod
    def from_django(cls) -> "FiltrationSettings":
        return cls.from_dict(getattr(django_settings, SETTINGS_NAME, None))


def get_filtration_settings() -> FiltrationSettings:
    """Load settings from the configured Django project."""
    return FiltrationSettings.from_django()


def validate_settings(config: FiltrationSettings) -> List[str]:
    """
    Validate loaded settings.

    Returns:
        List of error messages, empty when the configuration is usable.
    """
    errors: List[str] = []

    if not isinstance(config.parameters, dict):
        errors.append("parameters must be a mapping of logical names to query keys")
    else:
        unknown = sorted(set(config.parameters) - set(DEFAULT_PARAMETERS))
        if unknown:
            errors.append(f"Unknown parameter names: {', '.join(unknown)}")
        keys = list(config.parameters.values())
        if any(not isinstance(value, str) or not value for value in keys):
            errors.append("Parameter keys must be non-empty strings")
        elif len(set(keys)) != len(keys):
            errors.append("Parameter keys must be unique")

    invalid_conditions = [
        condition
        for condition in config.accepted_search_conditions or []
        if condition not in SEARCH_CONDITIONS
    ]
    if invalid_conditions:
        errors.append(
            f"Unsupported search conditions: {', '.join(map(str, invalid_conditions))}"
        )

    if str(config.default_sort_direction).lower() not in SORT_DIRECTIONS:
        errors.append(
            f"default_sort_direction must be one of {', '.join(SORT_DIRECTIONS)}"
        )

    if not isinstance(config.list_separator, str) or not config.list_separator:
        errors.append("list_separator must be a non-empty string")

    return errors


def check_settings() -> FiltrationSettings:
    """Load and validate settings, raising ImproperlyConfigured on errors."""
    config = get_filtration_settings()
    errors = validate_settings(config)
    if errors:
        raise ImproperlyConfigured(
            f"Invalid {SETTINGS_NAME} configuration: " + "; ".join(errors)
        )
    return config
