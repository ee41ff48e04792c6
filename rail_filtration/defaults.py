"""
Default configuration for the rail-filtration library.

Every setting the library consumes is listed here. Projects override any of
them through the ``RAIL_FILTRATION`` dictionary in their Django settings.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "rail-filtration"


# --------------------------------------------------------------------------- #
# Request parameter names (logical name -> query string key)
# --------------------------------------------------------------------------- #
DEFAULT_PARAMETERS: dict[str, str] = {
    "search": "search",
    "search_fields": "searchFields",
    "search_join": "searchJoin",
    "order_by": "orderBy",
    "sorted_by": "sortedBy",
    "filter": "filter",
    "with": "with",
    "with_count": "withCount",
}


LIBRARY_DEFAULTS: dict[str, Any] = {
    "parameters": dict(DEFAULT_PARAMETERS),
    "accepted_search_conditions": ["=", "like"],
    "default_sort_direction": "asc",
    "list_separator": ";",
    "log_malformed_search": False,
}


def merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Merge user overrides into library defaults.

    The ``parameters`` section is merged key by key so a project can rename a
    single parameter without restating the others.
    """
    merged = dict(base)
    for key, value in (overrides or {}).items():
        if key == "parameters" and isinstance(value, dict):
            parameters = dict(merged.get("parameters") or {})
            parameters.update(value)
            merged["parameters"] = parameters
        else:
            merged[key] = value
    return merged


__all__ = [
    "LIBRARY_VERSION",
    "LIBRARY_NAME",
    "DEFAULT_PARAMETERS",
    "LIBRARY_DEFAULTS",
    "merge_settings",
]
