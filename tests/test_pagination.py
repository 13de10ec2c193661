"""Tests for page slicing and clamping."""

from __future__ import annotations

import pytest

from src.services.discovery.pagination import clamp_page, paginate, total_pages


@pytest.mark.parametrize(
    ("count", "size", "expected"),
    [(0, 8, 1), (1, 8, 1), (8, 8, 1), (9, 8, 2), (17, 4, 5)],
)
def test_total_pages_has_floor_of_one(count, size, expected):
    assert total_pages(count, size) == expected


def test_total_pages_rejects_non_positive_size():
    with pytest.raises(ValueError):
        total_pages(3, 0)


def test_clamp_page():
    assert clamp_page(0, 3) == 1
    assert clamp_page(-4, 3) == 1
    assert clamp_page(7, 3) == 3
    assert clamp_page(2, 3) == 2


def test_paginate_slices_requested_page():
    page = paginate(list(range(10)), 4, 2)

    assert page.items == [4, 5, 6, 7]
    assert page.page == 2
    assert page.total_pages == 3
    assert page.total_items == 10


def test_paginate_clamps_stale_page():
    page = paginate(list(range(10)), 4, 9)

    assert page.page == 3
    assert page.items == [8, 9]


def test_paginate_empty_listing():
    page = paginate([], 8, 3)

    assert page.items == []
    assert page.page == 1
    assert page.total_pages == 1
