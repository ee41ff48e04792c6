"""
Configuration package for rail-filtration.
"""

from .settings import (
    FiltrationSettings,
    check_settings,
    get_filtration_settings,
    validate_settings,
)

__all__ = [
    "FiltrationSettings",
    "check_settings",
    "get_filtration_settings",
    "validate_settings",
]
