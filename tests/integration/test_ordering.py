"""
Integration tests for orderBy/sortedBy, filter, with and withCount.
"""

import pytest

from rail_filtration import FiltrationEngine
from rail_filtration.ordering import (
    apply_order_by,
    find_field_by_column,
    is_single_valued_path,
    resolve_model_for_table,
    split_eager_paths,
)
from rail_filtration.parsing import parse_order_by
from test_app.models import Author, Category, Post

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


def titles(queryset):
    return [post.title for post in queryset]


def run(params):
    return FiltrationEngine(Post.objects.all(), params).run()


class TestResolution:
    def test_resolve_model_for_table(self):
        assert resolve_model_for_table("authors") is Author
        assert resolve_model_for_table("category") is Category
        assert resolve_model_for_table("widgets") is None

    def test_find_field_by_column(self):
        assert find_field_by_column(Post, "author_id").name == "author"
        assert find_field_by_column(Post, "reviewer_id").name == "reviewer_id"
        assert find_field_by_column(Post, "missing") is None


class TestOrderBy:
    def test_base_column(self, blog):
        queryset = run({"orderBy": "views", "sortedBy": "desc"})
        assert titles(queryset) == ["Hello World", "Django Tips", "alice"]

    def test_default_direction_is_ascending(self, blog):
        assert titles(run({"orderBy": "views"})) == ["alice", "Django Tips", "Hello World"]

    def test_table_qualified_base_column(self, blog):
        assert titles(run({"orderBy": "posts.views"}))[0] == "alice"

    def test_implicit_join_key_orders_across_relation(self, blog):
        queryset = run({"orderBy": "authors|name"})
        sql = str(queryset.query)
        assert 'LEFT OUTER JOIN "authors"' in sql
        assert '"posts"."author_id" = "authors"."id"' in sql
        assert titles(queryset) == ["alice", "Hello World", "Django Tips"]

    def test_explicit_join_key_descending(self, blog):
        queryset = run({"orderBy": "authors:author_id|name", "sortedBy": "DESC"})
        assert titles(queryset) == ["Django Tips", "Hello World", "alice"]

    def test_plain_column_join_uses_subquery(self, blog):
        queryset = run({"orderBy": "authors:reviewer_id|name"})
        assert titles(queryset) == ["alice", "Django Tips", "Hello World"]
        # only the base table's columns are selected
        assert len(queryset.query.annotation_select) == 0

    def test_explicit_join_key_on_base_table(self, blog):
        directive = parse_order_by("posts:featured_post_id|title")
        assert directive.qualified_join_key(Author._meta.db_table) == (
            "authors.featured_post_id"
        )
        queryset = FiltrationEngine(
            Author.objects.all(), {"orderBy": "posts:featured_post_id|title"}
        ).run()
        assert [author.name for author in queryset] == ["Alice", "Bob"]

        # the default key would be authors.post_id, which does not exist
        unordered = Author.objects.all()
        assert apply_order_by(unordered, parse_order_by("posts|title")) is unordered

    def test_unknown_table_leaves_queryset_unordered(self, blog):
        queryset = Post.objects.all()
        ordered = apply_order_by(queryset, parse_order_by("widgets|name"))
        assert ordered is queryset

    def test_unknown_join_key_leaves_queryset_unordered(self, blog):
        queryset = Post.objects.all()
        ordered = apply_order_by(queryset, parse_order_by("authors:editor_id|name"))
        assert ordered is queryset


class TestProjectionAndEagerLoading:
    def test_filter_restricts_loaded_columns(self, blog):
        queryset = run({"filter": "title;status"})
        fields, defer = queryset.query.deferred_loading
        assert set(fields) == {"title", "status"}
        assert defer is False
        post = queryset.get(pk=blog["hello"].pk)
        assert post.get_deferred_fields() >= {"body", "views"}

    def test_filter_as_list(self, blog):
        queryset = run({"filter": ["title", "views"]})
        assert set(queryset.query.deferred_loading[0]) == {"title", "views"}

    def test_with_splits_select_and_prefetch(self, blog):
        queryset = run({"with": "author;tags;comments;author.posts"})
        assert queryset.query.select_related == {"author": {}}
        assert queryset._prefetch_related_lookups == ("tags", "comments", "author__posts")
        assert len(list(queryset)) == 3

    def test_projection_keeps_select_related_relations(self, blog):
        queryset = run({"filter": "title", "with": "author"})
        assert set(queryset.query.deferred_loading[0]) == {"title", "author"}
        post = queryset.get(pk=blog["hello"].pk)
        assert post.author.name == "Alice"

    def test_with_count(self, blog):
        queryset = run({"withCount": "tags;comments", "orderBy": "views"})
        counts = [(post.title, post.tags_count, post.comments_count) for post in queryset]
        assert counts == [
            ("alice", 0, 0),
            ("Django Tips", 0, 0),
            ("Hello World", 1, 2),
        ]

    def test_eager_path_classification(self):
        assert is_single_valued_path(Post, "author")
        assert is_single_valued_path(Post, "category")
        assert not is_single_valued_path(Post, "tags")
        assert not is_single_valued_path(Post, "author__posts")
        assert not is_single_valued_path(Post, "missing")
        assert split_eager_paths(Post, ["author", "author", "tags"]) == (["author"], ["tags"])
