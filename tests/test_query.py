"""Unit tests for the list query translator."""

import pytest

from services.query import (
    DEFAULT_SORT,
    ListQuery,
    build_list_query,
    build_pagination,
    nest_query_params,
    parse_int,
    parse_sort,
    rewrite_operators,
)


def test_bracket_keys_are_nested():
    params = nest_query_params([("rating[gte]", "4"), ("rating[lt]", "5"), ("status", "active")])

    assert params == {"rating": {"gte": "4", "lt": "5"}, "status": "active"}


def test_repeated_keys_collect_values():
    params = nest_query_params([("status", "active"), ("status", "inactive"), ("status", "suspended")])

    assert params == {"status": ["active", "inactive", "suspended"]}


def test_operators_below_a_field_are_prefixed():
    rewritten = rewrite_operators({"rating": {"gte": "4", "lt": "5"}, "status": {"in": "active,inactive"}})

    assert rewritten == {"rating": {"$gte": "4", "$lt": "5"}, "status": {"$in": "active,inactive"}}


def test_top_level_names_and_values_are_not_rewritten():
    rewritten = rewrite_operators({"in": "gt", "name": "lte"})

    assert rewritten == {"in": "gt", "name": "lte"}


def test_unknown_operators_are_left_as_is():
    assert rewrite_operators({"rating": {"ne": "4"}}) == {"rating": {"ne": "4"}}


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 7),
        ("", 7),
        ("abc", 7),
        ("0", 7),
        ("-3", 7),
        ("3", 3),
        (" 12", 12),
        ("5abc", 5),
        (["4", "9"], 4),
    ],
)
def test_parse_int_falls_back_to_default(value, expected):
    assert parse_int(value, 7) == expected


def test_parse_sort_reads_direction_prefix():
    assert parse_sort("name,-rating") == [("name", False), ("rating", True)]


def test_parse_sort_defaults_to_rating_descending():
    assert parse_sort(None) == DEFAULT_SORT == [("rating", True)]
    assert parse_sort(" , ") == [("rating", True)]


def test_no_params_uses_defaults():
    query = build_list_query([])

    assert query == ListQuery(filters={}, fields=None, sort=[("rating", True)], page=1, limit=10)
    assert query.start_index == 0
    assert query.end_index == 10


def test_reserved_params_are_removed_from_filter():
    query = build_list_query(
        [
            ("select", "name,rating"),
            ("sort", "-name"),
            ("page", "3"),
            ("limit", "5"),
            ("rating[gte]", "4"),
        ]
    )

    assert query.filters == {"rating": {"$gte": "4"}}
    assert query.fields == ["name", "rating"]
    assert query.sort == [("name", True)]
    assert query.page == 3
    assert query.limit == 5
    assert query.start_index == 10
    assert query.end_index == 15


def test_limit_is_capped():
    query = build_list_query([("limit", "5000")], default_limit=10, max_limit=100)

    assert query.limit == 100


def test_pagination_first_page():
    query = ListQuery(filters={}, fields=None, sort=[], page=1, limit=10)

    assert build_pagination(query, 25) == {
        "total": 25,
        "pages": 3,
        "current_page": 1,
        "limit": 10,
        "next": {"page": 2, "limit": 10},
    }


def test_pagination_middle_page_has_both_links():
    query = ListQuery(filters={}, fields=None, sort=[], page=2, limit=10)
    pagination = build_pagination(query, 25)

    assert pagination["next"] == {"page": 3, "limit": 10}
    assert pagination["prev"] == {"page": 1, "limit": 10}


def test_pagination_last_page_has_no_next():
    query = ListQuery(filters={}, fields=None, sort=[], page=3, limit=10)
    pagination = build_pagination(query, 25)

    assert "next" not in pagination
    assert pagination["prev"] == {"page": 2, "limit": 10}


@pytest.mark.parametrize("total, limit, pages", [(0, 10, 0), (10, 10, 1), (11, 10, 2), (1, 3, 1)])
def test_pages_is_ceiling_of_total_over_limit(total, limit, pages):
    query = ListQuery(filters={}, fields=None, sort=[], page=1, limit=limit)

    assert build_pagination(query, total)["pages"] == pages
