"""
QuerySet and manager exposing request filtration on models.
"""

from typing import Any, Optional

from django.db import models

from .source import FilterSource, filter_queryset


class FilterableQuerySet(models.QuerySet):
    """QuerySet with a ``filtrate`` method driven by request parameters."""

    def filtrate(
        self,
        params: Any,
        filters: Any = None,
        source: Optional[FilterSource] = None,
    ) -> models.QuerySet:
        """
        Apply search, ordering, projection, eager loading and named filters.

        Example:
            Post.objects.filter(published=True).filtrate(request)
        """
        return filter_queryset(self, params, source=source, filters=filters)


FilterableManager = models.Manager.from_queryset(FilterableQuerySet)


__all__ = ["FilterableManager", "FilterableQuerySet"]
