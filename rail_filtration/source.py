"""
Data source descriptions.

A FilterSource tells the engine which fields a data source exposes to the
``search`` parameter and which named filters it supports. Models declare
both on a nested ``FilterMeta`` class:

    class Post(models.Model):
        class FilterMeta:
            searchable = ["title:like", "author.name:like", "status"]
            filters = {"status": StatusFilter}
            filter_bags = [PublishingFilters]  # or "app.filters.PublishingFilters"
"""

from typing import Any, Dict, List, Optional, Sequence, Type

from django.db import models
from django.utils.module_loading import import_string

from .conf.settings import FiltrationSettings
from .engine import FiltrationEngine
from .fields import SearchableDeclaration, normalize_searchable_fields
from .registry import FilterDescriptor, FilterRegistry

META_ATTRIBUTE = "FilterMeta"


class FilterSource:
    """Searchable fields and filters of one data source."""

    def __init__(
        self,
        searchable: SearchableDeclaration = None,
        filters: Any = None,
        filter_bags: Optional[Sequence[Any]] = None,
    ):
        self.searchable = searchable
        self.filters = filters
        self.filter_bags = list(filter_bags or [])

    @classmethod
    def for_model(cls, model: Type[models.Model]) -> "FilterSource":
        """Read the ``FilterMeta`` declaration of a model (empty when absent)."""
        meta = getattr(model, META_ATTRIBUTE, None)
        if meta is None:
            return cls()
        return cls(
            searchable=getattr(meta, "searchable", None),
            filters=getattr(meta, "filters", None),
            filter_bags=getattr(meta, "filter_bags", None),
        )

    def searchable_fields(self) -> Dict[str, str]:
        return normalize_searchable_fields(self.searchable)

    def filter_descriptors(self) -> List[FilterDescriptor]:
        """Bag filters first, then the source's own filters overriding same keys."""
        registry = FilterRegistry()
        for bag in self.filter_bags:
            if isinstance(bag, str):
                bag = import_string(bag)
            registry.register(bag)
        registry.register(self.filters)
        return registry.descriptors()


def filter_queryset(
    queryset: models.QuerySet,
    params: Any,
    source: Optional[FilterSource] = None,
    filters: Any = None,
    settings: Optional[FiltrationSettings] = None,
) -> models.QuerySet:
    """
    Filter a queryset with the request parameters.

    Args:
        queryset: Queryset to filter.
        params: HttpRequest, QueryDict or mapping of request parameters.
        source: Data source description; read from the model's ``FilterMeta``
            when omitted.
        filters: Extra filters for this call, overriding source filters.
        settings: Filtration settings; loaded from Django settings when omitted.

    Returns:
        The filtered queryset.
    """
    if source is None:
        source = FilterSource.for_model(queryset.model)
    engine = FiltrationEngine(
        queryset, params, source.searchable_fields(), settings=settings
    )
    engine.register_filters(source.filter_descriptors())
    if filters:
        engine.register_filters(filters)
    return engine.run()


__all__ = ["FilterSource", "filter_queryset"]
