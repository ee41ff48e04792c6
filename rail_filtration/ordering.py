"""
Ordering, projection and eager-loading helpers.

These apply the ``orderBy``/``sortedBy``, ``filter``, ``with`` and
``withCount`` parameters to a queryset. Each helper returns the queryset
unchanged when it has nothing to do.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple, Type

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist
from django.db import models
from django.db.models import Count, OuterRef, Subquery

from .parsing import OrderDirective, singularize

logger = logging.getLogger(__name__)

_ALIAS_INVALID_RE = re.compile(r"[^0-9A-Za-z_]")


def resolve_model_for_table(table: str) -> Optional[Type[models.Model]]:
    """
    Find the installed model stored in ``table``.

    Matches the database table name first, then the model name in singular
    or plural form (``categories`` -> ``Category``).
    """
    if not table:
        return None
    lowered = table.lower()
    candidates = {lowered, singularize(lowered)}
    by_name = None
    for model in apps.get_models():
        if model._meta.db_table == table:
            return model
        if by_name is None and model._meta.model_name in candidates:
            by_name = model
    return by_name


def find_field_by_column(
    model: Type[models.Model], column: str
) -> Optional[models.Field]:
    """Return the concrete field whose column, attname or name is ``column``."""
    for field in model._meta.concrete_fields:
        if column in (field.column, field.attname, field.name):
            return field
    return None


def _strip_table_prefix(column: str, model: Type[models.Model]) -> str:
    """Turn ``table.column`` into ``column`` for the given model's table."""
    prefix, dot, name = column.rpartition(".")
    if dot and prefix in (model._meta.db_table, model._meta.model_name):
        return name
    return column.replace(".", "__")


def _ordering(expression: str, descending: bool) -> str:
    return f"-{expression}" if descending else expression


def apply_order_by(
    queryset: models.QuerySet, directive: OrderDirective
) -> models.QuerySet:
    """
    Order a queryset by a parsed ``orderBy`` directive.

    Without a table the column of the base model is used. With a table, the
    base join key must be a forward relation to that table (ordered across
    the relation, a LEFT OUTER JOIN when the key is nullable) or a plain
    column holding the target id (ordered by a correlated subquery, which
    keeps left-join semantics). Only the base model's columns are selected.
    """
    model = queryset.model
    if not directive.requires_join:
        column = _strip_table_prefix(directive.column, model)
        return queryset.order_by(_ordering(column, directive.descending))

    target = resolve_model_for_table(directive.table)
    if target is None:
        logger.warning(
            f"Cannot order {model.__name__} by unknown table '{directive.table}'"
        )
        return queryset

    join_field = find_field_by_column(model, directive.join_key)
    if join_field is None:
        logger.warning(
            f"Cannot order {model.__name__} by {directive.table}.{directive.column}: "
            f"no join key {directive.qualified_join_key(model._meta.db_table)}"
        )
        return queryset

    column = _strip_table_prefix(directive.column, target)
    if (
        join_field.is_relation
        and join_field.related_model is target
        and join_field.target_field.primary_key
    ):
        logger.debug(
            f"Ordering {model.__name__} across relation {join_field.name} by {column}"
        )
        return queryset.order_by(
            _ordering(f"{join_field.name}__{column}", directive.descending)
        )

    alias = _ALIAS_INVALID_RE.sub("_", f"_order_{directive.table}_{column}")
    joined = target._default_manager.filter(pk=OuterRef(join_field.attname))
    logger.debug(
        f"Ordering {model.__name__} by subquery on {target.__name__}.{column} "
        f"joined through {join_field.attname}"
    )
    return queryset.alias(**{alias: Subquery(joined.values(column)[:1])}).order_by(
        _ordering(alias, directive.descending)
    )


def apply_projection(
    queryset: models.QuerySet,
    columns: Sequence[str],
    keep: Iterable[str] = (),
) -> models.QuerySet:
    """
    Restrict the loaded columns to ``columns``.

    ``keep`` lists extra fields that must stay loaded (relations traversed by
    ``select_related``).
    """
    if not columns:
        return queryset
    model = queryset.model
    only: List[str] = []
    for column in list(columns) + list(keep):
        name = _strip_table_prefix(column, model)
        if name not in only:
            only.append(name)
    return queryset.only(*only)


def is_single_valued_path(model: Type[models.Model], path: str) -> bool:
    """Whether every hop of ``path`` is a forward or reverse to-one relation."""
    current = model
    for part in path.split("__"):
        if current is None:
            return False
        try:
            field = current._meta.get_field(part)
        except FieldDoesNotExist:
            return False
        if not field.is_relation or field.many_to_many or field.one_to_many:
            return False
        current = field.related_model
    return True


def split_eager_paths(
    model: Type[models.Model], relations: Iterable[str]
) -> Tuple[List[str], List[str]]:
    """Split relation names into ``select_related`` and ``prefetch_related`` paths."""
    select: List[str] = []
    prefetch: List[str] = []
    for relation in relations:
        path = relation.replace(".", "__")
        bucket = select if is_single_valued_path(model, path) else prefetch
        if path not in bucket:
            bucket.append(path)
    return select, prefetch


def apply_eager_loading(
    queryset: models.QuerySet, relations: Sequence[str]
) -> models.QuerySet:
    """Eager-load the named relations."""
    if not relations:
        return queryset
    select, prefetch = split_eager_paths(queryset.model, relations)
    if select:
        queryset = queryset.select_related(*select)
    if prefetch:
        queryset = queryset.prefetch_related(*prefetch)
    return queryset


def apply_relation_counts(
    queryset: models.QuerySet, relations: Sequence[str]
) -> models.QuerySet:
    """Annotate ``<relation>_count`` for each named relation."""
    if not relations:
        return queryset
    annotations = {}
    for relation in relations:
        path = relation.replace(".", "__")
        annotations[f"{path}_count"] = Count(path, distinct=True)
    return queryset.annotate(**annotations)


__all__ = [
    "apply_eager_loading",
    "apply_order_by",
    "apply_projection",
    "apply_relation_counts",
    "find_field_by_column",
    "is_single_valued_path",
    "resolve_model_for_table",
    "split_eager_paths",
]
