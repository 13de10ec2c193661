"""Facet choices, related products and merchandising badges."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from src.models.catalog import FacetOptions
from src.models.product import Category, Product

BEST_SELLER_THRESHOLD = 20
LOW_STOCK_THRESHOLD = 3
NEW_ARRIVAL_WINDOW = timedelta(days=7)


def _distinct(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def price_bounds(products: Sequence[Product]) -> tuple[float, float]:
    """Observed (min, max) price, or (0, 0) for an empty catalog."""
    if not products:
        return 0.0, 0.0
    prices = [p.price for p in products]
    return min(prices), max(prices)


def hot_categories(products: Iterable[Product], limit: int = 2) -> list[str]:
    """Category ids with the highest summed sales, best seller first."""
    sales: dict[str, int] = {}
    for product in products:
        if not product.category_id:
            continue
        sales[product.category_id] = sales.get(product.category_id, 0) + product.sold
    ranked = sorted(sales.items(), key=lambda item: item[1], reverse=True)
    return [category_id for category_id, _ in ranked[:limit]]


def facet_options(
    products: Sequence[Product],
    categories: Sequence[Category] = (),
) -> FacetOptions:
    low, high = price_bounds(products)
    return FacetOptions(
        sizes=_distinct(size for p in products for size in p.sizes),
        colors=_distinct(color for p in products for color in p.colors),
        min_price=low,
        max_price=high,
        categories=list(categories),
        hot_category_ids=hot_categories(products),
    )


def related_products(
    products: Iterable[Product], product: Product, limit: int = 4
) -> list[Product]:
    """Other products from the same category, in catalog order."""
    if not product.category_id:
        return []
    related = [
        p
        for p in products
        if p.category_id == product.category_id and p.id != product.id
    ]
    return related[:limit]


def new_arrivals(products: Iterable[Product], limit: int = 8) -> list[Product]:
    """Most recently created products, newest first."""
    return sorted(products, key=lambda p: p.created_at, reverse=True)[:limit]


def product_badge(product: Product, now: datetime | None = None) -> str | None:
    """First matching badge: ``"best_seller"``, then ``"low_stock"``, then ``"new"``."""
    if product.sold > BEST_SELLER_THRESHOLD:
        return "best_seller"
    if product.stock <= LOW_STOCK_THRESHOLD:
        return "low_stock"

    current = now or datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    if current - product.created_at < NEW_ARRIVAL_WINDOW:
        return "new"
    return None
