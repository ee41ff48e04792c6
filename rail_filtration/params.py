"""
Request parameter access.

Wraps a Django request, a ``QueryDict`` or a plain mapping behind one
read-only interface. Multi-valued query string keys come back as lists,
single values as strings.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from django.http import HttpRequest
from django.utils.datastructures import MultiValueDict


def is_empty_value(value: Any) -> bool:
    """Whether a request value counts as absent (``""``, ``None``, empty list)."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False


class RequestParameters:
    """Read-only view over request parameters."""

    def __init__(self, source: Any = None):
        if isinstance(source, RequestParameters):
            source = source.source
        elif isinstance(source, HttpRequest):
            source = source.GET
        elif source is not None and hasattr(source, "query_params"):
            source = source.query_params
        self.source = source if source is not None else {}

    @classmethod
    def wrap(cls, source: Any) -> "RequestParameters":
        if isinstance(source, cls):
            return source
        return cls(source)

    def get(self, key: str, default: Any = None) -> Any:
        if isinstance(self.source, MultiValueDict):
            values = self.source.getlist(key)
            if not values:
                return default
            if len(values) == 1:
                return values[0]
            return list(values)
        if isinstance(self.source, Mapping):
            return self.source.get(key, default)
        return default

    def has(self, key: str) -> bool:
        return key in self.source

    def filled(self, key: str) -> bool:
        """Whether ``key`` is present with a non-empty value."""
        return not is_empty_value(self.get(key))

    def only(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Return the non-empty values for ``keys``, in ``keys`` order."""
        values: Dict[str, Any] = {}
        for key in keys:
            value = self.get(key)
            if not is_empty_value(value):
                values[key] = value
        return values

    def first(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Single string value for ``key`` (the last one when repeated)."""
        value = self.get(key, default)
        if isinstance(value, (list, tuple)):
            return value[-1] if value else default
        return value

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"RequestParameters({dict(self.source)!r})"


__all__ = ["RequestParameters", "is_empty_value"]
