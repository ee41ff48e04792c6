"""
Filter handler contract.

A filter handler holds the business logic behind one named request
parameter. The engine creates a fresh handler for every invocation and calls
``handler.filter(queryset, value)``; the returned queryset feeds the next
handler.

django-filter filters plug in through ``FilterSetHandler``, which runs the
request value through the filter's form field before applying it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from django.db import models
from django.http import QueryDict
from django_filters import Filter, FilterSet

logger = logging.getLogger(__name__)


class FilterHandler(ABC):
    """
    Base class for named filters.

    Subclasses implement ``filter``. ``mappings`` translates request values
    into stored values, e.g. ``{"live": "published"}``; values without a
    mapping pass through unchanged.

    Example:
        class StatusFilter(FilterHandler):
            mappings = {"live": "published"}

            def filter(self, queryset, value):
                return queryset.filter(status=self.resolve_value(value))
    """

    mappings: Dict[Any, Any] = {}

    @abstractmethod
    def filter(self, queryset: models.QuerySet, value: Any) -> Optional[models.QuerySet]:
        """Apply the filter and return the filtered queryset."""

    def resolve_value(self, value: Any) -> Any:
        """Map a request value (or each item of a list) through ``mappings``."""
        if isinstance(value, (list, tuple)):
            return [self.resolve_value(item) for item in value]
        try:
            return self.mappings.get(value, value)
        except TypeError:
            return value


class FilterSetHandler(FilterHandler):
    """
    Apply one filter of a django-filter ``FilterSet``.

    The request value is bound to the FilterSet form so the filter receives a
    cleaned value. An invalid value leaves the queryset unfiltered, as an
    invalid field does in ``FilterSet.qs``.
    """

    def __init__(self, filterset_class: Type[FilterSet], name: str):
        self.filterset_class = filterset_class
        self.name = name

    def bind(self, value: Any) -> QueryDict:
        data = QueryDict(mutable=True)
        if isinstance(value, (list, tuple)):
            data.setlist(self.name, [str(item) for item in value])
        else:
            data[self.name] = value
        return data

    def filter(self, queryset: models.QuerySet, value: Any) -> models.QuerySet:
        filterset = self.filterset_class(data=self.bind(value), queryset=queryset)
        form = filterset.form
        if not form.is_valid() and self.name in form.errors:
            logger.debug(
                f"Ignoring invalid value for filter '{self.name}': "
                f"{form.errors[self.name].as_text()}"
            )
            return queryset
        cleaned = form.cleaned_data.get(self.name)
        return filterset.filters[self.name].filter(queryset, cleaned)


def filterset_for_filter(name: str, filter_: Filter) -> Type[FilterSet]:
    """Build a single-filter FilterSet class around a standalone filter."""
    return type(f"{name.title().replace('_', '')}FilterSet", (FilterSet,), {name: filter_})


__all__ = ["FilterHandler", "FilterSetHandler", "filterset_for_filter"]
