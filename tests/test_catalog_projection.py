# tests/test_catalog_projection.py
from datetime import datetime, timezone

import pytest

from storefront.models.product import Product
from storefront.services.catalog import (
    UNCATEGORIZED,
    cap_each_category,
    filter_by_category,
    group_by_category,
    list_categories,
    newest_first,
    paginate,
    star_breakdown,
    text_filter,
)


def _ts(day: str):
    return datetime.fromisoformat(day).replace(tzinfo=timezone.utc)


def _p(pid, name="", category="Books", details="", created=None):
    return Product(id=pid, name=name, category=category, details=details,
                   created_at=_ts(created) if created else None)


@pytest.fixture
def collection():
    return {
        "a": _p("a", name="Atomic Habits", category="Books", details="Paperback", created="2024-01-01"),
        "b": _p("b", name="Dune", category="Books", details="Science fiction classic", created="2024-06-01"),
        "c": _p("c", name="Lego City", category="Toys", details="Building blocks", created="2024-03-01"),
        "d": _p("d", name="USB Hub", category="Electronics", details="Four port hub", created="2024-02-01"),
    }


def test_text_filter_blank_query_returns_everything(collection):
    assert text_filter(collection, "") == collection
    assert text_filter(collection, "   ") == collection
    assert text_filter(collection, None) == collection


def test_text_filter_matches_any_field_case_insensitively(collection):
    assert set(text_filter(collection, "dune")) == {"b"}
    assert set(text_filter(collection, "TOYS")) == {"c"}
    assert set(text_filter(collection, "hub")) == {"d"}
    # "book" hits the Books category and the "Building blocks" details does not match
    assert set(text_filter(collection, "book")) == {"a", "b"}


def test_text_filter_is_sound_and_complete(collection):
    query = "o"
    result = text_filter(collection, query)
    for key, product in collection.items():
        hit = any(query in (f or "").lower() for f in (product.name, product.category, product.details))
        assert (key in result) == hit


def test_text_filter_tolerates_missing_fields():
    collection = {
        "x": Product(id="x", name=None, category=None, details="wooden spoon"),
        "y": Product(id="y", name="Spoon rest", category=None, details=None),
        "z": Product(id="z", name=None, category=None, details=None),
    }
    assert set(text_filter(collection, "spoon")) == {"x", "y"}


def test_text_filter_does_not_mutate_input(collection):
    before = dict(collection)
    text_filter(collection, "dune")
    assert collection == before


def test_group_by_category_scenario():
    collection = {
        "A": _p("A", category="Books", created="2024-01-01"),
        "B": _p("B", category="Books", created="2024-06-01"),
        "C": _p("C", category="Toys", created="2024-03-01"),
    }
    grouped = group_by_category(collection)
    assert {k: [p.id for p in v] for k, v in grouped.items()} == {"Books": ["B", "A"], "Toys": ["C"]}

    capped = cap_each_category(grouped, 1)
    assert {k: [p.id for p in v] for k, v in capped.items()} == {"Books": ["B"], "Toys": ["C"]}


def test_group_by_category_partitions_collection(collection):
    grouped = group_by_category(collection)
    ids = [p.id for bucket in grouped.values() for p in bucket]
    assert sorted(ids) == sorted(collection)
    assert len(ids) == len(collection)


def test_group_by_category_orders_newest_first_and_undated_last():
    collection = {
        "old": _p("old", created="2023-01-01"),
        "none": _p("none"),
        "new": _p("new", created="2024-05-01"),
    }
    bucket = group_by_category(collection)["Books"]
    assert [p.id for p in bucket] == ["new", "old", "none"]
    dated = [p.created_at for p in bucket if p.created_at]
    assert dated == sorted(dated, reverse=True)


def test_group_by_category_uncategorized_bucket_and_first_seen_order():
    collection = {
        "1": _p("1", category="Toys"),
        "2": _p("2", category=""),
        "3": _p("3", category=None),
        "4": _p("4", category="Books"),
        "5": _p("5", category="Toys"),
    }
    grouped = group_by_category(collection)
    assert list(grouped) == ["Toys", UNCATEGORIZED, "Books"]
    assert [p.id for p in grouped[UNCATEGORIZED]] == ["2", "3"]


def test_group_by_category_keeps_typo_categories_apart():
    collection = {"1": _p("1", category="Books"), "2": _p("2", category="Bookz")}
    assert set(group_by_category(collection)) == {"Books", "Bookz"}


def test_group_by_category_uses_collection_key_as_identity():
    collection = {"key-1": Product(id=None, name="No id yet", category="Books")}
    assert group_by_category(collection)["Books"][0].id == "key-1"


def test_cap_each_category_returns_prefixes(collection):
    grouped = group_by_category(collection)
    capped = cap_each_category(grouped, 1)
    for category, bucket in capped.items():
        assert len(bucket) <= 1
        assert bucket == grouped[category][: len(bucket)]
    assert cap_each_category(grouped, 0) == {k: [] for k in grouped}


def test_filter_by_category(collection):
    assert set(filter_by_category(collection, "Books")) == {"a", "b"}
    assert filter_by_category(collection, "") == collection
    assert filter_by_category(collection, "Garden") == {}
    assert set(filter_by_category({"u": _p("u", category=None)}, UNCATEGORIZED)) == {"u"}


def test_newest_first_and_paginate(collection):
    ordered = newest_first(collection)
    assert [p.id for p in ordered] == ["b", "c", "d", "a"]
    assert [p.id for p in paginate(ordered, 2, 1)] == ["c", "d"]
    assert paginate(ordered, 10, 10) == []


def test_list_categories_first_seen(collection):
    assert list_categories(collection) == ["Books", "Toys", "Electronics"]


@pytest.mark.parametrize(
    "rating,expected",
    [
        (3.5, (3, True, 1)),
        (5, (5, False, 0)),
        (1, (1, False, 4)),
        (4.2, (4, True, 0)),
        (0, (0, False, 5)),
        (7, (5, False, 0)),
        (-2, (0, False, 5)),
        (None, (0, False, 5)),
    ],
)
def test_star_breakdown(rating, expected):
    result = star_breakdown(rating)
    assert result == expected
    assert result.full + int(result.half) + result.empty == 5
