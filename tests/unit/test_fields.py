"""
Unit tests for searchable field declarations and request parameters.
"""

import pytest
from django.http import QueryDict
from django.test import RequestFactory

from rail_filtration.fields import SearchableField, normalize_searchable_fields
from rail_filtration.params import RequestParameters, is_empty_value

pytestmark = pytest.mark.unit


class TestSearchableField:
    def test_relation_path_and_column(self):
        field = SearchableField("author.profile.name", "like")
        assert field.relation_path == "author.profile"
        assert field.column == "name"
        assert field.is_like

    def test_plain_field_has_no_relation(self):
        field = SearchableField.parse("title")
        assert field.relation_path is None
        assert field.condition == "="

    def test_parse_annotated_declaration(self):
        assert SearchableField.parse("email: LIKE ") == SearchableField("email", "like")


class TestNormalizeSearchableFields:
    def test_mapping(self):
        assert normalize_searchable_fields({"name": "LIKE", "age": ""}) == {
            "name": "like",
            "age": "=",
        }

    def test_mixed_sequence(self):
        fields = normalize_searchable_fields(
            ["name", ("email", "ilike"), SearchableField("bio", "Like"), "role:="]
        )
        assert list(fields.items()) == [
            ("name", "="),
            ("email", "ilike"),
            ("bio", "like"),
            ("role", "="),
        ]

    def test_empty(self):
        assert normalize_searchable_fields(None) == {}
        assert normalize_searchable_fields([]) == {}


class TestRequestParameters:
    def test_query_dict_values(self):
        params = RequestParameters(QueryDict("a=1&a=2&b=x&c="))
        assert params.get("a") == ["1", "2"]
        assert params.get("b") == "x"
        assert params.get("c") == ""
        assert params.get("missing", "default") == "default"
        assert params.first("a") == "2"

    def test_http_request_uses_query_string(self):
        request = RequestFactory().get("/posts/", {"search": "alice"})
        params = RequestParameters.wrap(request)
        assert params.get("search") == "alice"
        assert "search" in params
        assert RequestParameters.wrap(params) is params

    def test_mapping_source(self):
        params = RequestParameters({"status": "live", "tags": ["a", "b"]})
        assert params.get("tags") == ["a", "b"]
        assert params.filled("status")
        assert not params.filled("missing")

    def test_only_skips_empty_values(self):
        params = RequestParameters({"a": "1", "b": "", "c": None, "d": [], "e": "0"})
        assert params.only(["e", "a", "b", "c", "d", "z"]) == {"e": "0", "a": "1"}

    @pytest.mark.parametrize("value", [None, "", [], (), {}])
    def test_empty_values(self, value):
        assert is_empty_value(value)

    @pytest.mark.parametrize("value", ["0", 0, False, ["x"], "a"])
    def test_non_empty_values(self, value):
        assert not is_empty_value(value)
