"""
Parsers for the small grammars embedded in filtration request parameters.

Grammars:
    search        field1:value1;field2:value2 or a bare value, or both mixed
    searchFields  field[:condition];...
    orderBy       column or table[:joinKey]|column
    with, withCount, filter
                  ;-delimited lists

Every parser here is total: malformed input is skipped, never raised, with
the single exception of a ``searchFields`` override that rejects every
declared field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .exceptions import FieldsNotAcceptedError
from .fields import SearchableDeclaration, normalize_condition, normalize_searchable_fields


LIST_SEPARATOR = ";"
SCOPE_SEPARATOR = ":"
ORDER_SEPARATOR = "|"
ACCEPTED_SEARCH_CONDITIONS = ("=", "like")

_IRREGULAR_SINGULARS = {
    "people": "person",
    "men": "man",
    "women": "woman",
    "children": "child",
    "mice": "mouse",
    "geese": "goose",
    "feet": "foot",
    "teeth": "tooth",
    "data": "datum",
}
_UNCOUNTABLE = frozenset(
    ["equipment", "information", "news", "series", "species", "sheep", "fish"]
)


@dataclass(frozen=True)
class OrderDirective:
    """Parsed ``orderBy``/``sortedBy`` pair."""

    column: str
    direction: str = "asc"
    table: Optional[str] = None
    join_key: Optional[str] = None

    @property
    def requires_join(self) -> bool:
        return self.table is not None

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    def qualified_join_key(self, base_table: str) -> Optional[str]:
        """Join key qualified by the base table (``users.author_id``)."""
        if self.join_key is None:
            return None
        return f"{base_table}.{self.join_key}"


def parse_search_fields(
    declared: SearchableDeclaration,
    override: Optional[Sequence[str]] = None,
    accepted_conditions: Iterable[str] = ACCEPTED_SEARCH_CONDITIONS,
) -> Dict[str, str]:
    """
    Restrict and re-annotate declared searchable fields.

    Args:
        declared: Searchable field declaration of the data source.
        override: Requested ``searchFields`` tokens (``field`` or
            ``field:condition``). ``None`` or empty keeps the declaration.
        accepted_conditions: Conditions a token may re-annotate a field with.

    Returns:
        Ordered mapping of field name to condition, in override order.

    Raises:
        FieldsNotAcceptedError: If no requested field is declared.
    """
    fields = normalize_searchable_fields(declared)
    if not override:
        return fields

    accepted = {normalize_condition(c) for c in accepted_conditions}
    requested: Dict[str, Optional[str]] = {}
    for token in override:
        token = str(token).strip()
        if not token:
            continue
        parts = token.split(SCOPE_SEPARATOR)
        if len(parts) == 2:
            name = parts[0].strip()
            condition = normalize_condition(parts[1])
            if condition in accepted:
                requested[name] = condition
            else:
                # unknown annotation: declared condition stands
                requested.setdefault(name, None)
        else:
            requested.setdefault(token, None)

    result: Dict[str, str] = {}
    for name, condition in requested.items():
        if name in fields:
            result[name] = condition or fields[name]

    if not result:
        raise FieldsNotAcceptedError(list(requested))
    return result


def parse_search_term_map(
    search: Optional[str],
    skipped: Optional[List[str]] = None,
    separator: str = LIST_SEPARATOR,
) -> Dict[str, str]:
    """
    Parse ``field:value`` segments of a search string.

    Segments without exactly one colon are skipped. When ``skipped`` is given
    the dropped segments are appended to it.

    Examples:
        >>> parse_search_term_map("a:1;b:2;bad")
        {"a": "1", "b": "2"}
    """
    terms: Dict[str, str] = {}
    if not search:
        return terms

    for segment in str(search).split(separator):
        parts = segment.split(SCOPE_SEPARATOR)
        if len(parts) == 2:
            terms[parts[0]] = parts[1]
            continue
        if skipped is not None:
            skipped.append(segment)
    return terms


def parse_fallback_search_value(
    search: Optional[str], separator: str = LIST_SEPARATOR
) -> Optional[str]:
    """
    Return the first unscoped token of a search string.

    Examples:
        >>> parse_fallback_search_value("a:1;plain;b:2")
        "plain"
        >>> parse_fallback_search_value("a:1;b:2") is None
        True
    """
    if not search:
        return None
    for segment in str(search).split(separator):
        if SCOPE_SEPARATOR not in segment:
            return segment
    return None


def parse_order_by(raw: str, direction: Optional[str] = None) -> OrderDirective:
    """
    Parse an ``orderBy`` value.

    ``title`` orders the base table. ``posts|title`` joins ``posts`` on
    ``<base>.post_id = posts.id``; ``posts:author_id|title`` names the base
    table join key explicitly.
    """
    direction = normalize_direction(direction)
    split = str(raw).split(ORDER_SEPARATOR)
    if len(split) < 2:
        return OrderDirective(column=split[0].strip(), direction=direction)

    sort_table, sort_column = split[0].strip(), split[1].strip()
    table, scope, key = sort_table.partition(SCOPE_SEPARATOR)
    if scope:
        join_key = key.strip()
    else:
        join_key = f"{singularize(table)}_id"
    return OrderDirective(
        column=sort_column,
        direction=direction,
        table=table.strip(),
        join_key=join_key,
    )


def normalize_direction(value: Optional[str], default: str = "asc") -> str:
    """Return ``desc`` for a case-insensitive ``desc`` value, else ``asc``."""
    if value is None or str(value).strip() == "":
        value = default
    return "desc" if str(value).strip().lower() == "desc" else "asc"


def split_list_param(value: Any, separator: str = LIST_SEPARATOR) -> List[str]:
    """
    Split a ``;``-delimited list parameter.

    Lists and tuples are flattened, each item split on the separator. Blank
    items are dropped.
    """
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    result: List[str] = []
    for item in items:
        if item is None:
            continue
        for part in str(item).split(separator):
            part = part.strip()
            if part:
                result.append(part)
    return result


def singularize(word: str) -> str:
    """
    Singularize an English table name using suffix rules.

    Examples:
        >>> singularize("categories")
        "category"
        >>> singularize("posts")
        "post"
    """
    value = str(word or "")
    lowered = value.lower()
    if not lowered or lowered in _UNCOUNTABLE:
        return value
    if lowered in _IRREGULAR_SINGULARS:
        return _IRREGULAR_SINGULARS[lowered]
    if lowered.endswith("ies") and len(lowered) > 3:
        return value[:-3] + "y"
    if lowered.endswith(("sses", "shes", "ches", "xes", "zes")):
        return value[:-2]
    if lowered.endswith("ss") or lowered.endswith("us") or lowered.endswith("is"):
        return value
    if lowered.endswith("s"):
        return value[:-1]
    return value


__all__ = [
    "ACCEPTED_SEARCH_CONDITIONS",
    "OrderDirective",
    "normalize_direction",
    "parse_fallback_search_value",
    "parse_order_by",
    "parse_search_fields",
    "parse_search_term_map",
    "singularize",
    "split_list_param",
]
