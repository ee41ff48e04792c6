"""
Search predicate builder.

Turns the ``search``, ``searchFields`` and ``searchJoin`` parameters into a
single ``Q`` group that is AND-ed into the queryset.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type

from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.db import models
from django.db.models import Q

from . import lookups  # noqa: F401  registers the like/ilike lookups
from .fields import SearchableField
from .parsing import LIST_SEPARATOR, parse_fallback_search_value, parse_search_term_map

logger = logging.getLogger(__name__)

CONDITION_LOOKUPS = {
    "=": "exact",
    "like": "like",
    "ilike": "ilike",
}


class SearchPredicateBuilder:
    """
    Build the search predicate group for a model.

    The first field with a value seeds the group; every following field is
    OR-ed, or AND-ed when ``search_join`` is ``and``.

    Usage:
        builder = SearchPredicateBuilder(Post, {"title": "like"}, "hello")
        queryset = builder.apply(Post.objects.all())
    """

    def __init__(
        self,
        model: Type[models.Model],
        fields: Dict[str, str],
        search: str,
        search_join: Optional[str] = None,
        separator: str = LIST_SEPARATOR,
    ):
        self.model = model
        self.fields = fields
        self.search = search
        self.force_and = str(search_join or "").lower() == "and"
        self.skipped: List[str] = []
        self.terms = parse_search_term_map(search, skipped=self.skipped, separator=separator)
        self.fallback = parse_fallback_search_value(search, separator=separator)

    def effective_value(self, field_name: str) -> Optional[str]:
        if field_name in self.terms:
            return self.terms[field_name]
        return self.fallback

    def build(self) -> Optional[Q]:
        """Return the combined predicate, or None when no field has a value."""
        group: Optional[Q] = None
        for name, condition in self.fields.items():
            value = self.effective_value(name)
            if value is None:
                continue
            predicate = self.build_predicate(SearchableField(name, condition), value)
            if predicate is None:
                if not self.force_and:
                    continue
                # an AND clause that cannot match empties the group
                predicate = Q(pk__in=[])
            if group is None:
                group = predicate
            elif self.force_and:
                group &= predicate
            else:
                group |= predicate
        return group

    def build_predicate(self, field: SearchableField, value: Any) -> Optional[Q]:
        """
        Build the comparison for one field, through its relation if dotted.

        Returns None when an equality value cannot be converted to the
        field type (e.g. a word against an integer column); ``build`` then
        drops the field from an OR group and matches nothing under AND.
        """
        lookup_name = CONDITION_LOOKUPS.get(field.condition)
        if lookup_name is None:
            logger.debug(
                f"Unsupported search condition '{field.condition}' on {field.name}, using '='"
            )
            lookup_name = "exact"
        if field.is_like:
            value = f"%{value}%"
        elif not self._accepts_value(field, value):
            logger.debug(f"Skipping search field {field.name}: incompatible value {value!r}")
            return None

        if field.relation_path is None:
            return Q(**{f"{field.name}__{lookup_name}": value})

        path = field.relation_path.replace(".", "__")
        related = self.model._base_manager.filter(
            **{f"{path}__{field.column}__{lookup_name}": value}
        )
        return Q(pk__in=related.values("pk"))

    def _get_model_field(self, field: SearchableField) -> Optional[models.Field]:
        current = self.model
        parts = field.name.split(".")
        try:
            for part in parts[:-1]:
                current = current._meta.get_field(part).related_model
                if current is None:
                    return None
            return current._meta.get_field(parts[-1])
        except (FieldDoesNotExist, AttributeError):
            return None

    def _accepts_value(self, field: SearchableField, value: Any) -> bool:
        model_field = self._get_model_field(field)
        if model_field is None or model_field.is_relation:
            return True
        try:
            model_field.to_python(value)
        except (ValidationError, ValueError, TypeError):
            return False
        return True

    def apply(self, queryset: models.QuerySet) -> models.QuerySet:
        predicate = self.build()
        if predicate is None:
            return queryset
        return queryset.filter(predicate)


__all__ = ["CONDITION_LOOKUPS", "SearchPredicateBuilder"]
