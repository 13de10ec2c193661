"""Tests for filtering, suggestions and sorting."""

from __future__ import annotations

import pytest

from src.models.catalog import FacetSelection, SortKey
from src.services.discovery.filtering import filter_products, suggest_products
from src.services.discovery.predicates import build_predicate
from src.services.discovery.sorting import sort_products


@pytest.fixture()
def catalog(make_product):
    return [
        make_product("p1", name="Blue shirt", price=30, sizes=["M"]),
        make_product("p2", name="red Dress", price=80, sizes=["S"]),
        make_product("p3", name="Shirt dress", price=30, sizes=["M", "L"]),
        make_product("p4", name="Éclair apron", price=15),
        make_product("p5", name="apron", price=80),
    ]


def test_filter_is_stable_subset(catalog):
    predicate = build_predicate(
        FacetSelection(price_range=(0, 100), selected_sizes=frozenset({"M"})), {}
    )

    filtered = filter_products(catalog, predicate)

    assert [p.id for p in filtered] == ["p1", "p3"]
    assert all(p in catalog for p in filtered)


def test_filter_is_idempotent(catalog):
    predicate = build_predicate(FacetSelection(price_range=(20, 90)), {})

    once = filter_products(catalog, predicate)

    assert filter_products(once, predicate) == once


def test_suggestions_are_capped_and_keep_catalog_order(make_product):
    products = [make_product(f"p{i}", name=f"Lamp {i}", price=100 - i) for i in range(10)]

    suggestions = suggest_products(products, "lamp", limit=6)

    assert [p.id for p in suggestions] == [f"p{i}" for i in range(6)]


def test_suggestions_empty_for_blank_search(catalog):
    assert suggest_products(catalog, "   ") == []


def test_suggestions_ignore_other_facets(catalog):
    assert [p.id for p in suggest_products(catalog, "dress")] == ["p2", "p3"]


def test_latest_sorts_by_identifier_descending(catalog):
    assert [p.id for p in sort_products(catalog, SortKey.LATEST)] == [
        "p5",
        "p4",
        "p3",
        "p2",
        "p1",
    ]


def test_price_sorts_are_stable(catalog):
    ascending = sort_products(catalog, SortKey.PRICE_ASC)
    descending = sort_products(catalog, SortKey.PRICE_DESC)

    assert [p.id for p in ascending] == ["p4", "p1", "p3", "p2", "p5"]
    assert [p.id for p in descending] == ["p2", "p5", "p1", "p3", "p4"]


def test_name_sorts_ignore_case_and_accents(catalog):
    ordered = sort_products(catalog, "name_asc")

    assert [p.id for p in ordered] == ["p5", "p1", "p4", "p2", "p3"]
    assert [p.id for p in sort_products(catalog, "name_desc")] == [
        "p3",
        "p2",
        "p4",
        "p1",
        "p5",
    ]


@pytest.mark.parametrize("key", list(SortKey))
def test_sort_returns_permutation_without_mutating(catalog, key):
    original = list(catalog)

    ordered = sort_products(catalog, key)

    assert catalog == original
    assert sorted(p.id for p in ordered) == sorted(p.id for p in catalog)
    assert sort_products(ordered, key) == ordered
