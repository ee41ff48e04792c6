"""
Rail Filtration - request parameter filtering for Django querysets.

Translates query string parameters (``search``, ``searchFields``,
``searchJoin``, ``orderBy``, ``sortedBy``, ``filter``, ``with``,
``withCount`` and named filter keys) into queryset operations.

Example Usage:
    from rail_filtration import FilterHandler, filter_queryset

    class StatusFilter(FilterHandler):
        def filter(self, queryset, value):
            return queryset.filter(status=value)

    queryset = filter_queryset(
        Post.objects.all(), request, filters={"status": StatusFilter}
    )
"""

from .defaults import LIBRARY_VERSION
from .engine import FiltrationEngine
from .exceptions import FieldsNotAcceptedError, FiltrationError, UnknownFilterError
from .fields import SearchableField, normalize_searchable_fields
from .handlers import FilterHandler, FilterSetHandler
from .parsing import (
    OrderDirective,
    parse_fallback_search_value,
    parse_order_by,
    parse_search_fields,
    parse_search_term_map,
    split_list_param,
)
from .registry import ActiveFilter, FilterBag, FilterDescriptor, FilterRegistry
from .source import FilterSource, filter_queryset

__version__ = LIBRARY_VERSION

__all__ = [
    "ActiveFilter",
    "FieldsNotAcceptedError",
    "FilterBag",
    "FilterDescriptor",
    "FilterHandler",
    "FilterRegistry",
    "FilterSetHandler",
    "FilterSource",
    "FiltrationEngine",
    "FiltrationError",
    "OrderDirective",
    "SearchableField",
    "UnknownFilterError",
    "filter_queryset",
    "normalize_searchable_fields",
    "parse_fallback_search_value",
    "parse_order_by",
    "parse_search_fields",
    "parse_search_term_map",
    "split_list_param",
]
