import django_filters

from rail_filtration import FilterBag, FilterHandler


class StatusFilter(FilterHandler):
    mappings = {"live": "published"}

    def filter(self, queryset, value):
        return queryset.filter(status=self.resolve_value(value))


class BagStatusFilter(FilterHandler):
    def filter(self, queryset, value):
        return queryset.filter(status__startswith=value)


class MinViewsFilter(FilterHandler):
    def filter(self, queryset, value):
        try:
            return queryset.filter(views__gte=int(value))
        except (TypeError, ValueError):
            return queryset.none()


class TagFilter(FilterHandler):
    def filter(self, queryset, value):
        names = value if isinstance(value, list) else [value]
        return queryset.filter(tags__name__in=names).distinct()


class CountingFilter(FilterHandler):
    """Records each instance so tests can check handler freshness."""

    instances = []

    def __init__(self):
        self.calls = 0
        CountingFilter.instances.append(self)

    def filter(self, queryset, value):
        self.calls += 1
        return queryset


class PublishingFilters(FilterBag):
    name = "publishing"
    filters = {
        "status": BagStatusFilter,
        "min_views": MinViewsFilter,
    }


class PostFilterSet(django_filters.FilterSet):
    title = django_filters.CharFilter(lookup_expr="icontains")
    min_views = django_filters.NumberFilter(field_name="views", lookup_expr="gte")
    is_draft = django_filters.BooleanFilter(method="filter_is_draft")

    def filter_is_draft(self, queryset, name, value):
        if value:
            return queryset.filter(status="draft")
        return queryset.exclude(status="draft")
