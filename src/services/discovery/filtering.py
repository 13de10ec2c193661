"""Apply product predicates to catalog snapshots."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import islice

from src.config import settings
from src.models.product import Product
from src.services.discovery.predicates import (
    ProductPredicate,
    build_search_predicate,
    normalize_search,
)


def filter_products(
    products: Iterable[Product], predicate: ProductPredicate
) -> list[Product]:
    """Stable filter keeping the original relative order."""
    return [product for product in products if predicate(product)]


def suggest_products(
    products: Iterable[Product],
    search_text: str | None,
    limit: int | None = None,
) -> list[Product]:
    """Autocomplete suggestions: text matches only, capped, in catalog order."""
    if not normalize_search(search_text):
        return []

    cap = settings.SUGGESTION_LIMIT if limit is None else limit
    matches = build_search_predicate(search_text)
    return list(islice((p for p in products if matches(p)), max(cap, 0)))
