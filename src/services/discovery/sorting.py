"""Ordering of filtered product lists."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable

from src.models.catalog import SortKey
from src.models.product import Product


def collation_key(name: str) -> str:
    """Accent- and case-insensitive key used for name ordering."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def sort_products(products: Iterable[Product], sort_key: SortKey | str) -> list[Product]:
    """Return a new list ordered by ``sort_key``.

    ``sorted`` is stable, including with ``reverse=True``, so products with
    equal keys keep their incoming relative order for every sort key.
    """
    key = SortKey(sort_key)
    items = list(products)

    if key is SortKey.LATEST:
        return sorted(items, key=lambda p: p.id, reverse=True)
    if key is SortKey.PRICE_ASC:
        return sorted(items, key=lambda p: p.price)
    if key is SortKey.PRICE_DESC:
        return sorted(items, key=lambda p: p.price, reverse=True)
    if key is SortKey.NAME_ASC:
        return sorted(items, key=lambda p: collation_key(p.name))
    return sorted(items, key=lambda p: collation_key(p.name), reverse=True)
