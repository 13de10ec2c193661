"""Build product predicates out of the active facet selection."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

from src.models.catalog import FacetSelection
from src.models.product import Product
from src.models.review import RatingAggregate

ProductPredicate = Callable[[Product], bool]


def is_discounted(product: Product) -> bool:
    return product.is_discounted


def round_rating(average: float) -> int:
    """Round half up, so a 2.5 average lands in the 3-star bucket."""
    return math.floor(average + 0.5)


def normalize_search(search_text: str | None) -> str:
    return (search_text or "").strip().casefold()


def build_search_predicate(search_text: str | None) -> ProductPredicate:
    """Case-insensitive substring match on name or description."""
    needle = normalize_search(search_text)

    def matches(product: Product) -> bool:
        if not needle:
            return True
        return (
            needle in product.name.casefold()
            or needle in (product.description or "").casefold()
        )

    return matches


def build_predicate(
    selection: FacetSelection,
    ratings: Mapping[str, RatingAggregate],
) -> ProductPredicate:
    """Combine every active facet into a single pure predicate.

    Facet types are AND-ed together; values inside one facet are OR-ed.
    Unrated products never satisfy an active rating facet.
    """
    category = selection.selected_category
    low, high = selection.price_range
    text_matches = build_search_predicate(selection.search_text)
    sizes = frozenset(selection.selected_sizes)
    colors = frozenset(selection.selected_colors)
    stars = frozenset(selection.selected_ratings)
    only_discount = selection.only_discount
    # Detached copy; the predicate must not see later edits to ``ratings``.
    averages = {product_id: agg.average for product_id, agg in ratings.items()}

    def predicate(product: Product) -> bool:
        if category and product.category_id != category:
            return False
        if not low <= product.price <= high:
            return False
        if not text_matches(product):
            return False
        if sizes and sizes.isdisjoint(product.sizes):
            return False
        if colors and colors.isdisjoint(product.colors):
            return False
        if stars:
            average = averages.get(product.id)
            if average is None or round_rating(average) not in stars:
                return False
        if only_discount and not product.is_discounted:
            return False
        return True

    return predicate
