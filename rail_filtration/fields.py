"""
Searchable field declarations.

A data source declares which of its fields take part in the generic
``search`` parameter, and with which comparison. Declarations are accepted
in several shapes and normalized to an ordered ``name -> condition`` mapping.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

DEFAULT_CONDITION = "="
LIKE_CONDITIONS = frozenset(["like", "ilike"])


def normalize_condition(condition: Optional[str]) -> str:
    """Lower-case and trim a comparison condition; empty means equality."""
    value = str(condition or "").strip().lower()
    return value or DEFAULT_CONDITION


@dataclass(frozen=True)
class SearchableField:
    """A field eligible for the ``search`` parameter."""

    name: str
    condition: str = DEFAULT_CONDITION

    @property
    def relation_path(self) -> Optional[str]:
        """Dotted relation prefix (``author.profile`` for ``author.profile.name``)."""
        if "." not in self.name:
            return None
        return self.name.rsplit(".", 1)[0]

    @property
    def column(self) -> str:
        """Trailing field name compared against the value."""
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_like(self) -> bool:
        return self.condition in LIKE_CONDITIONS

    @classmethod
    def parse(cls, declaration: str) -> "SearchableField":
        """Build from ``"name"`` or ``"name:condition"``."""
        name, _, condition = str(declaration).partition(":")
        return cls(name=name.strip(), condition=normalize_condition(condition))


SearchableDeclaration = Union[
    Mapping[str, str],
    Iterable[Union[str, SearchableField, tuple]],
    None,
]


def normalize_searchable_fields(declared: SearchableDeclaration) -> Dict[str, str]:
    """
    Normalize declared searchable fields to an ordered mapping.

    Args:
        declared: Mapping of ``{name: condition}``, or an iterable of names,
            ``"name:condition"`` strings, ``(name, condition)`` pairs or
            SearchableField instances.

    Returns:
        Dict of field name to normalized condition, in declaration order.

    Examples:
        >>> normalize_searchable_fields(["name", "email:like"])
        {"name": "=", "email": "like"}
    """
    fields: Dict[str, str] = {}
    if not declared:
        return fields

    if isinstance(declared, Mapping):
        for name, condition in declared.items():
            fields[str(name)] = normalize_condition(condition)
        return fields

    for entry in declared:
        spec = _to_searchable_field(entry)
        if spec is not None and spec.name:
            fields[spec.name] = spec.condition
    return fields


def _to_searchable_field(entry: Any) -> Optional[SearchableField]:
    if isinstance(entry, SearchableField):
        return SearchableField(entry.name, normalize_condition(entry.condition))
    if isinstance(entry, str):
        return SearchableField.parse(entry)
    if isinstance(entry, (tuple, list)) and entry:
        condition = entry[1] if len(entry) > 1 else None
        return SearchableField(str(entry[0]), normalize_condition(condition))
    return None


__all__ = [
    "DEFAULT_CONDITION",
    "LIKE_CONDITIONS",
    "SearchableField",
    "normalize_condition",
    "normalize_searchable_fields",
]
