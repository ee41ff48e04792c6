"""
Class-based view integration.

``FiltrationMixin`` filters ``get_queryset()`` with the current request. A
``searchFields`` override that rejects every searchable field answers with a
400 JSON error instead of a server error.
"""

import logging
from typing import Any, Optional

from django.http import JsonResponse

from .exceptions import FieldsNotAcceptedError
from .source import FilterSource, filter_queryset

logger = logging.getLogger(__name__)


class FiltrationMixin:
    """
    Mixin for list views backed by a queryset.

    Example:
        class PostListView(FiltrationMixin, ListView):
            model = Post
            filters = {"status": StatusFilter}
    """

    filter_source: Optional[FilterSource] = None
    filters: Any = None

    def get_filter_source(self) -> Optional[FilterSource]:
        return self.filter_source

    def get_filters(self) -> Any:
        return self.filters

    def filtrate_queryset(self, queryset):
        return filter_queryset(
            queryset,
            self.request,
            source=self.get_filter_source(),
            filters=self.get_filters(),
        )

    def get_queryset(self):
        return self.filtrate_queryset(super().get_queryset())

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except FieldsNotAcceptedError as exc:
            logger.info(f"Rejected search fields {exc.fields} on {request.path}")
            return JsonResponse(
                {"error": exc.message_key, "fields": exc.fields},
                status=400,
            )


__all__ = ["FiltrationMixin"]
