"""
Filter registry and resolver.

Maps filter keys to handler factories, decides which filters are active for
a request and hands out fresh handler instances.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Type

from django.utils.module_loading import import_string
from django_filters import Filter, FilterSet

from .exceptions import UnknownFilterError
from .handlers import FilterSetHandler, filterset_for_filter
from .params import RequestParameters, is_empty_value

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], Any]


@dataclass(frozen=True)
class FilterDescriptor:
    """A filter key and the factory producing its handler."""

    key: str
    make_handler: Optional[HandlerFactory]

    @classmethod
    def of(cls, key: str, spec: Any) -> "FilterDescriptor":
        """
        Build a descriptor from a handler spec.

        Accepted specs: a FilterHandler class (or any class with a ``filter``
        method), a dotted import path to one, a django-filter ``Filter``
        class or instance, a handler instance (copied per invocation) or a
        zero-argument factory. Anything else yields a descriptor without a
        factory, which fails when resolved.
        """
        if isinstance(spec, FilterDescriptor):
            return cls(key, spec.make_handler)
        return cls(key, handler_factory(key, spec))


@dataclass(frozen=True)
class ActiveFilter:
    """A registered filter triggered by the current request."""

    key: str
    value: Any
    descriptor: FilterDescriptor


def handler_factory(key: str, spec: Any) -> Optional[HandlerFactory]:
    """Return a zero-argument callable creating a fresh handler for ``spec``."""
    if spec is None:
        return None
    if isinstance(spec, str):
        return partial(_build_from_path, key, spec)
    if isinstance(spec, type):
        if issubclass(spec, Filter):
            return lambda: FilterSetHandler(filterset_for_filter(key, spec()), key)
        return spec
    if isinstance(spec, Filter):
        return lambda: FilterSetHandler(
            filterset_for_filter(key, copy.deepcopy(spec)), key
        )
    if callable(getattr(spec, "filter", None)):
        return partial(copy.deepcopy, spec)
    if callable(spec):
        return spec
    return None


def _build_from_path(key: str, path: str) -> Any:
    factory = handler_factory(key, import_string(path))
    if factory is None:
        raise UnknownFilterError(key, f"'{path}' is not a filter handler")
    return factory()


def coerce_descriptors(filters: Any) -> List[FilterDescriptor]:
    """
    Normalize a filter declaration to a list of descriptors.

    Accepts a mapping ``{key: spec}``, a FilterBag (class or instance), or an
    iterable of FilterDescriptor objects and ``(key, spec)`` pairs.
    """
    if not filters:
        return []
    if hasattr(filters, "descriptors") and callable(filters.descriptors):
        bag = filters() if isinstance(filters, type) else filters
        return list(bag.descriptors())
    if isinstance(filters, Mapping):
        return [FilterDescriptor.of(str(key), spec) for key, spec in filters.items()]

    descriptors: List[FilterDescriptor] = []
    for entry in filters:
        if isinstance(entry, FilterDescriptor):
            descriptors.append(entry)
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            descriptors.append(FilterDescriptor.of(str(entry[0]), entry[1]))
        else:
            raise TypeError(f"Cannot register filter declaration {entry!r}")
    return descriptors


class FilterBag:
    """
    Reusable, named group of filters shared across data sources.

    Declare ``filters`` on a subclass or pass them in:

        class PublishingFilters(FilterBag):
            filters = {"status": StatusFilter, "author": AuthorFilter}
    """

    name: str = ""
    filters: Any = {}

    def __init__(self, filters: Any = None, name: Optional[str] = None):
        if filters is not None:
            self.filters = filters
        self.name = name or self.name or self.__class__.__name__

    def descriptors(self) -> List[FilterDescriptor]:
        return coerce_descriptors(self.filters)

    def keys(self) -> List[str]:
        return [descriptor.key for descriptor in self.descriptors()]

    @classmethod
    def from_filterset(
        cls, filterset_class: Type[FilterSet], name: Optional[str] = None
    ) -> "FilterBag":
        """Expose every filter of a django-filter FilterSet as a bag entry."""
        descriptors = [
            FilterDescriptor(key, partial(FilterSetHandler, filterset_class, key))
            for key in filterset_class.base_filters
        ]
        return cls(filters=descriptors, name=name or filterset_class.__name__)

    def __repr__(self) -> str:
        return f"<FilterBag {self.name}: {', '.join(self.keys())}>"


class FilterRegistry:
    """
    Ordered registry of filter descriptors.

    Registering a key again replaces its factory but keeps its original
    position, so data source filters override bag filters of the same key.
    """

    def __init__(self, filters: Any = None):
        self._descriptors: Dict[str, FilterDescriptor] = {}
        if filters:
            self.register(filters)

    def register(self, filters: Any) -> "FilterRegistry":
        for descriptor in coerce_descriptors(filters):
            if descriptor.key in self._descriptors:
                logger.debug(f"Overriding filter '{descriptor.key}'")
            self._descriptors[descriptor.key] = descriptor
        return self

    def descriptors(self) -> List[FilterDescriptor]:
        return list(self._descriptors.values())

    def keys(self) -> List[str]:
        return list(self._descriptors)

    def get(self, key: str) -> Optional[FilterDescriptor]:
        return self._descriptors.get(key)

    def resolve(self, key: str) -> Any:
        """
        Create a fresh handler for ``key``.

        Raises:
            UnknownFilterError: If the key is not registered, has no factory,
                names an unimportable handler, cannot be called without
                arguments, or does not return an object with a ``filter``
                method.
        """
        descriptor = self._descriptors.get(key)
        if descriptor is None or descriptor.make_handler is None:
            raise UnknownFilterError(key)
        try:
            handler = descriptor.make_handler()
        except ImportError as exc:
            raise UnknownFilterError(key, f"Cannot import filter '{key}': {exc}") from exc
        except TypeError as exc:
            raise UnknownFilterError(key, f"Cannot build filter '{key}': {exc}") from exc
        if not callable(getattr(handler, "filter", None)):
            raise UnknownFilterError(
                key, f"Filter '{key}' does not provide filter(queryset, value)"
            )
        return handler

    def resolve_active(self, params: Any) -> List[ActiveFilter]:
        """Registered filters present in ``params`` with a non-empty value."""
        params = RequestParameters.wrap(params)
        active: List[ActiveFilter] = []
        for key, descriptor in self._descriptors.items():
            value = params.get(key)
            if is_empty_value(value):
                continue
            active.append(ActiveFilter(key=key, value=value, descriptor=descriptor))
        return active

    def __contains__(self, key: str) -> bool:
        return key in self._descriptors

    def __iter__(self) -> Iterator[FilterDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self._descriptors)


__all__ = [
    "ActiveFilter",
    "FilterBag",
    "FilterDescriptor",
    "FilterRegistry",
    "coerce_descriptors",
    "handler_factory",
]
