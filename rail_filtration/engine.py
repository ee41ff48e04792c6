"""
Filtration engine.

Applies the default request parameters (search, ordering, projection, eager
loading) to a queryset, then every registered filter triggered by the
request, in registration order.
"""

import logging
from typing import Any, List, Optional, Sequence

from django.db import models

from .conf.settings import FiltrationSettings, get_filtration_settings
from .fields import SearchableDeclaration, normalize_searchable_fields
from .ordering import (
    apply_eager_loading,
    apply_order_by,
    apply_projection,
    apply_relation_counts,
    split_eager_paths,
)
from .params import RequestParameters, is_empty_value
from .parsing import parse_order_by, parse_search_fields, split_list_param
from .registry import ActiveFilter, FilterRegistry
from .search import SearchPredicateBuilder

logger = logging.getLogger(__name__)


class FiltrationEngine:
    """
    Build a filtered queryset from request parameters.

    Usage:
        engine = FiltrationEngine(Post.objects.all(), request, ["title:like"])
        engine.register_filters({"status": StatusFilter})
        queryset = engine.run()
    """

    def __init__(
        self,
        queryset: models.QuerySet,
        params: Any,
        searchable_fields: SearchableDeclaration = None,
        settings: Optional[FiltrationSettings] = None,
    ):
        self.queryset = queryset
        self.params = RequestParameters.wrap(params)
        self.searchable_fields = normalize_searchable_fields(searchable_fields)
        self.settings = settings or get_filtration_settings()
        self.registry = FilterRegistry()

    def register_filters(self, filters: Any) -> "FiltrationEngine":
        """Add filters; a key registered again keeps its place, takes the new handler."""
        self.registry.register(filters)
        return self

    plug_filters = register_filters

    def run(self) -> models.QuerySet:
        """Apply default filtration, then each active filter."""
        self.queryset = self.apply_default_filtration(self.queryset)

        for active in self.get_filters():
            handler = self.resolve_filter(active.key)
            logger.debug(f"Applying filter '{active.key}' with {active.value!r}")
            result = handler.filter(self.queryset, active.value)
            if result is not None:
                self.queryset = result

        return self.queryset

    def get_filters(self) -> List[ActiveFilter]:
        """Registered filters present in the request with a non-empty value."""
        return self.registry.resolve_active(self.params)

    def resolve_filter(self, key: str) -> Any:
        return self.registry.resolve(key)

    # ------------------------------------------------------------------ #
    # Default filtration
    # ------------------------------------------------------------------ #

    def param(self, name: str, default: Any = None) -> Any:
        """Request value for a logical parameter name (``search``, ``order_by``...)."""
        return self.params.get(self.settings.parameter(name), default)

    def split(self, value: Any) -> List[str]:
        return split_list_param(value, separator=self.settings.list_separator)

    def apply_default_filtration(self, queryset: models.QuerySet) -> models.QuerySet:
        queryset = self.apply_search(queryset)
        queryset = self.apply_ordering(queryset)

        relations = self.split(self.param("with"))
        select_paths, _ = split_eager_paths(queryset.model, relations)
        queryset = self.apply_projection(
            queryset, keep=[path.split("__")[0] for path in select_paths]
        )
        queryset = apply_eager_loading(queryset, relations)
        queryset = apply_relation_counts(queryset, self.split(self.param("with_count")))
        return queryset

    def apply_search(self, queryset: models.QuerySet) -> models.QuerySet:
        search = self.params.first(self.settings.parameter("search"))
        if is_empty_value(search) or not self.searchable_fields:
            return queryset

        override = self.param("search_fields")
        if override is not None:
            override = self.split(override)
        fields = parse_search_fields(
            self.searchable_fields,
            override,
            accepted_conditions=self.settings.accepted_search_conditions,
        )

        builder = SearchPredicateBuilder(
            queryset.model,
            fields,
            search,
            search_join=self.params.first(self.settings.parameter("search_join")),
            separator=self.settings.list_separator,
        )
        queryset = builder.apply(queryset)
        if builder.skipped and self.settings.log_malformed_search:
            logger.debug(f"Skipped malformed search segments: {builder.skipped!r}")
        return queryset

    def apply_ordering(self, queryset: models.QuerySet) -> models.QuerySet:
        order_by = self.params.first(self.settings.parameter("order_by"))
        if is_empty_value(order_by):
            return queryset
        direction = (
            self.params.first(self.settings.parameter("sorted_by"))
            or self.settings.default_sort_direction
        )
        return apply_order_by(queryset, parse_order_by(order_by, direction))

    def apply_projection(
        self, queryset: models.QuerySet, keep: Sequence[str] = ()
    ) -> models.QuerySet:
        columns = self.split(self.param("filter"))
        return apply_projection(queryset, columns, keep=keep)


__all__ = ["FiltrationEngine"]
