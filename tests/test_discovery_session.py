"""Tests for the discovery pipeline and interactive session state."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from src.models.catalog import CatalogSnapshot, FacetSelection, SortKey
from src.models.voucher import Voucher
from src.services.discovery.engine import (
    DiscoverySession,
    compute_view,
    parse_price,
    resolve_price_range,
)

NOW = datetime(2024, 1, 1, tzinfo=UTC)

PRICES = [200, 10, 120, 55, 90, 150, 35, 75, 180, 50]


@pytest.fixture()
def products(make_product):
    return [
        make_product(f"p{idx:02d}", name=f"Item {idx}", price=price)
        for idx, price in enumerate(PRICES)
    ]


@pytest.fixture()
def session(products):
    browser = DiscoverySession(user_id="U1", page_size=4, clock=lambda: NOW)
    browser.load_catalog(products)
    return browser


def test_load_catalog_clamps_price_range_to_observed_bounds(session):
    assert session.price_bounds == (10, 200)
    assert session.selection.price_range == (10, 200)
    assert session.view.total_items == 10
    assert session.view.total_pages == 3


def test_price_window_sorted_ascending_first_page(session):
    session.set_price_min(50)
    session.set_price_max(150)
    view = session.set_sort(SortKey.PRICE_ASC)

    assert [item.price for item in view.items] == [50, 55, 75, 90]
    assert view.page == 1
    assert view.total_items == 6
    assert view.total_pages == 2


def test_filter_change_resets_page(session):
    session.set_page(3)
    assert session.view.page == 3

    session.set_price_min(50)

    assert session.selection.current_page == 1
    assert session.view.page == 1


def test_sort_change_resets_page(session):
    session.set_page(2)

    session.set_sort("name_desc")

    assert session.view.page == 1


def test_set_page_is_clamped(session):
    assert session.set_page(99).page == 3
    assert session.set_page(-1).page == 1


def test_malformed_price_keeps_last_valid_value(session):
    session.set_price_min("60")
    view = session.set_price_min("sixty")

    assert session.selection.price_range == (60, 200)
    assert view.total_items == 6


def test_inverted_price_edits_snap_to_other_bound(session):
    session.set_price_max(100)
    session.set_price_min(150)
    assert session.selection.price_range == (100, 100)

    session.set_price_min(20)
    session.set_price_max(5)
    assert session.selection.price_range == (20, 20)


def test_price_edits_stay_inside_catalog_bounds(session):
    session.set_price_min(0)
    session.set_price_max(10_000)

    assert session.selection.price_range == (10, 200)


def test_shrinking_results_clamp_current_page(session, products):
    session.set_page(3)

    view = session.load_catalog(products[:3])

    assert view.page == 1
    assert view.total_pages == 1


def test_replace_reviews_rebuilds_rating_filter(session, make_review):
    session.toggle_rating(5)
    assert session.view.total_items == 0

    view = session.replace_reviews([make_review("p03", 5), make_review("p03", 4)])
    assert [item.id for item in view.items] == ["p03"]
    assert view.items[0].rating == 4.5
    assert view.items[0].review_count == 2

    assert session.replace_reviews([make_review("p03", 1)]).total_items == 0


def test_toggles_and_clear_filters(session, make_product):
    session.load_catalog(
        [
            make_product("a", sizes=["S"], colors=["red"], price=10),
            make_product("b", sizes=["M"], colors=["blue"], price=20),
        ]
    )
    session.toggle_size("S")
    assert [p.id for p in session.view.items] == ["a"]
    session.toggle_size("S")
    assert session.view.total_items == 2

    session.toggle_color("blue")
    session.set_search("product")
    session.set_only_discount(True)
    assert session.view.total_items == 0

    view = session.clear_filters()
    assert view.total_items == 2
    assert session.selection.price_range == (10, 20)


def test_suggestions_follow_search_text(session):
    view = session.set_search("item 1")

    assert [p.id for p in view.suggestions] == ["p01"]
    assert session.set_search("").suggestions == []


def test_session_does_not_share_caller_lists(session, products, make_product):
    products.append(make_product("zz", price=100))

    assert session.view.total_items == 10


def test_vouchers_follow_user_changes():
    browser = DiscoverySession(user_id="U1", clock=lambda: NOW)
    scoped = Voucher(
        code="VIP",
        title="VIP",
        discount_type="fixed",
        discount_value=5,
        user_id="U1",
        valid_to=datetime(2099, 1, 1, tzinfo=UTC),
    )

    assert browser.replace_vouchers([scoped]) == [scoped]
    assert browser.set_user("U2") == []


def test_apply_snapshot_carries_notices(products, make_review):
    browser = DiscoverySession(page_size=4, clock=lambda: NOW)
    snapshot = CatalogSnapshot(products=products, reviews=[make_review("p01", 3)])

    view = browser.apply_snapshot(snapshot, ["vouchers are temporarily unavailable"])

    assert view.notices == ["vouchers are temporarily unavailable"]
    assert view.ratings["p01"].average == 3.0
    assert browser.eligible_vouchers == []


def test_compute_view_empty_catalog():
    view = compute_view(CatalogSnapshot(), FacetSelection(), page_size=8, now=NOW)

    assert view.items == []
    assert view.total_pages == 1
    assert view.is_empty


@pytest.mark.parametrize(
    ("value", "expected"),
    [("12.5", 12.5), (" 7 ", 7.0), (3, 3.0), ("abc", None), (None, None), (-1, None)],
)
def test_parse_price(value, expected):
    assert parse_price(value) == expected


def test_resolve_price_range():
    assert resolve_price_range((10, 200), None, None) == (10, 200)
    assert resolve_price_range((10, 200), "50", "oops") == (50, 200)
    assert resolve_price_range((10, 200), 180, 60) == (60, 60)
    assert resolve_price_range((10, 200), 1, 900) == (10, 200)
