"""
Unit tests for the filter registry, descriptors and bags.
"""

import pytest

from rail_filtration.exceptions import UnknownFilterError
from rail_filtration.handlers import FilterHandler, FilterSetHandler
from rail_filtration.registry import (
    FilterBag,
    FilterDescriptor,
    FilterRegistry,
    coerce_descriptors,
)
from test_app.filters import (
    BagStatusFilter,
    MinViewsFilter,
    PostFilterSet,
    PublishingFilters,
    StatusFilter,
)

pytestmark = pytest.mark.unit


class ScopedStatusFilter(FilterHandler):
    def __init__(self, scope):
        self.scope = scope
        self.seen = []

    def filter(self, queryset, value):
        self.seen.append(value)
        return queryset.filter(status=value)


class TestRegistration:
    def test_model_filter_overrides_bag_filter_in_place(self):
        registry = FilterRegistry()
        registry.register(PublishingFilters)
        registry.register({"status": StatusFilter, "tag": BagStatusFilter})

        assert registry.keys() == ["status", "min_views", "tag"]
        assert isinstance(registry.resolve("status"), StatusFilter)
        assert isinstance(registry.resolve("min_views"), MinViewsFilter)

    def test_pairs_and_descriptors(self):
        descriptor = FilterDescriptor("views", MinViewsFilter)
        registry = FilterRegistry([("status", StatusFilter), descriptor])
        assert registry.keys() == ["status", "views"]
        assert registry.get("views") is descriptor
        assert "views" in registry
        assert len(registry) == 2

    def test_invalid_declaration_raises_type_error(self):
        with pytest.raises(TypeError):
            coerce_descriptors(["status"])

    def test_bag_instance_and_name(self):
        bag = FilterBag({"status": StatusFilter}, name="shared")
        assert bag.name == "shared"
        assert bag.keys() == ["status"]
        assert PublishingFilters().name == "publishing"

    def test_bag_from_filterset(self):
        bag = FilterBag.from_filterset(PostFilterSet)
        assert bag.name == "PostFilterSet"
        assert bag.keys() == ["title", "min_views", "is_draft"]
        handler = FilterRegistry(bag).resolve("title")
        assert isinstance(handler, FilterSetHandler)
        assert handler.filterset_class is PostFilterSet


class TestResolve:
    def test_handlers_are_fresh_per_resolution(self):
        registry = FilterRegistry({"status": StatusFilter})
        assert registry.resolve("status") is not registry.resolve("status")

    def test_handler_instance_is_copied(self):
        handler = StatusFilter()
        registry = FilterRegistry({"status": handler})
        resolved = registry.resolve("status")
        assert isinstance(resolved, StatusFilter)
        assert resolved is not handler

    def test_handler_instance_state_is_not_shared(self):
        handler = ScopedStatusFilter("posts")
        registry = FilterRegistry({"status": handler})
        registry.resolve("status").seen.append("draft")
        assert registry.resolve("status").seen == []
        assert handler.seen == []

    def test_import_path(self):
        registry = FilterRegistry({"status": "test_app.filters.StatusFilter"})
        assert isinstance(registry.resolve("status"), StatusFilter)

    def test_unregistered_key(self):
        with pytest.raises(UnknownFilterError) as exc_info:
            FilterRegistry().resolve("status")
        assert exc_info.value.key == "status"

    @pytest.mark.parametrize(
        "spec",
        [
            None,
            42,
            "test_app.filters.MissingFilter",
            "test_app.filters.PublishingFilters",
            lambda: object(),
            lambda queryset, value: queryset,
            ScopedStatusFilter,
        ],
    )
    def test_misconfigured_factories(self, spec):
        registry = FilterRegistry({"broken": spec})
        assert "broken" in registry
        with pytest.raises(UnknownFilterError):
            registry.resolve("broken")


class TestResolveActive:
    def test_only_registered_non_empty_keys_in_registration_order(self):
        registry = FilterRegistry(
            {"status": StatusFilter, "min_views": MinViewsFilter, "tag": BagStatusFilter}
        )
        active = registry.resolve_active(
            {"tag": "x", "other": "y", "status": "", "min_views": "10"}
        )
        assert [(item.key, item.value) for item in active] == [
            ("min_views", "10"),
            ("tag", "x"),
        ]

    @pytest.mark.parametrize("value", [None, "", []])
    def test_empty_values_are_inactive(self, value):
        registry = FilterRegistry({"status": StatusFilter})
        assert registry.resolve_active({"status": value}) == []


class TestFilterHandler:
    def test_resolve_value_uses_mappings(self):
        handler = StatusFilter()
        assert handler.resolve_value("live") == "published"
        assert handler.resolve_value("draft") == "draft"
        assert handler.resolve_value(["live", "draft"]) == ["published", "draft"]

    def test_resolve_value_with_unhashable_value(self):
        assert StatusFilter().resolve_value({"a": 1}) == {"a": 1}

    def test_abstract_handler_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            FilterHandler()
