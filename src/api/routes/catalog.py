"""Routes exposing the filtered, sorted and paginated catalog."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from redis.exceptions import RedisError

from src.config import settings
from src.models.catalog import CatalogView, FacetOptions, FacetSelection, SortKey
from src.models.product import Category, Product
from src.services.discovery.engine import compute_view, resolve_price_range
from src.services.discovery.filtering import suggest_products
from src.services.discovery.highlights import (
    facet_options,
    new_arrivals,
    price_bounds,
    related_products,
)
from src.services.discovery.snapshots import fetch_or_empty, load_snapshot
from src.services.storage.catalog_store import CatalogStoreDependency
from src.services.storage.errors import SnapshotFetchError
from src.services.storage.review_store import ReviewStoreDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.post(
    "/products",
    status_code=status.HTTP_201_CREATED,
    summary="Add or replace a product in the catalog snapshot",
)
async def save_product(payload: Product, store: CatalogStoreDependency) -> Product:
    try:
        return await store.save_product(payload)
    except RedisError:
        logger.exception("Failed to store product %s", payload.id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog store unavailable",
        )


@router.post(
    "/categories",
    status_code=status.HTTP_201_CREATED,
    summary="Add or replace a category",
)
async def save_category(payload: Category, store: CatalogStoreDependency) -> Category:
    try:
        return await store.save_category(payload)
    except RedisError:
        logger.exception("Failed to store category %s", payload.id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog store unavailable",
        )


@router.get(
    "/products",
    response_model=CatalogView,
    summary="Browse the catalog with facets, sorting and pagination",
)
async def browse_products(
    catalog: CatalogStoreDependency,
    reviews: ReviewStoreDependency,
    category: str | None = None,
    min_price: str | None = Query(None, description="Lower price bound"),
    max_price: str | None = Query(None, description="Upper price bound"),
    q: str = Query("", description="Case-insensitive substring search"),
    sizes: list[str] = Query([]),
    colors: list[str] = Query([]),
    ratings: list[int] = Query([]),
    only_discount: bool = False,
    sort: SortKey = SortKey.LATEST,
    page: int = 1,
) -> CatalogView:
    """Return one page of the catalog narrowed by the requested facets.

    Numeric price inputs are parsed leniently: unparseable values fall back to
    the observed catalog bounds instead of failing the request. Out-of-range
    pages are clamped.
    """
    if any(star < 1 or star > 5 for star in ratings):
        raise HTTPException(
            status_code=422,
            detail="Rating filters must be between 1 and 5",
        )

    snapshot, notices = await load_snapshot(catalog, reviews)
    selection = FacetSelection(
        selected_category=category or None,
        price_range=resolve_price_range(
            price_bounds(snapshot.products), min_price, max_price
        ),
        search_text=q,
        selected_sizes=frozenset(sizes),
        selected_colors=frozenset(colors),
        selected_ratings=frozenset(ratings),
        only_discount=only_discount,
        sort_key=sort,
        current_page=max(page, 1),
    )
    return compute_view(
        snapshot,
        selection,
        page_size=settings.PAGE_SIZE,
        suggestion_limit=settings.SUGGESTION_LIMIT,
        notices=notices,
    )


@router.get(
    "/suggestions",
    response_model=list[Product],
    summary="Autocomplete suggestions for a search prefix",
)
async def search_suggestions(
    catalog: CatalogStoreDependency,
    q: str = "",
    limit: int = Query(settings.SUGGESTION_LIMIT, ge=1, le=50),
) -> list[Product]:
    notices: list[str] = []
    products = await fetch_or_empty("products", catalog.get_products(), notices)
    return suggest_products(products, q, limit)


@router.get(
    "/facets",
    response_model=FacetOptions,
    summary="Available facet values for the current catalog",
)
async def list_facets(catalog: CatalogStoreDependency) -> FacetOptions:
    notices: list[str] = []
    products = await fetch_or_empty("products", catalog.get_products(), notices)
    categories = await fetch_or_empty("categories", catalog.get_categories(), notices)
    return facet_options(products, categories)


@router.get(
    "/new-arrivals",
    response_model=list[Product],
    summary="Most recently added products, newest first",
)
async def list_new_arrivals(
    catalog: CatalogStoreDependency,
    limit: int = Query(settings.NEW_ARRIVALS_LIMIT, ge=1, le=50),
) -> list[Product]:
    notices: list[str] = []
    products = await fetch_or_empty("products", catalog.get_products(), notices)
    return new_arrivals(products, limit)


@router.get(
    "/products/{product_id}/related",
    response_model=list[Product],
    summary="Products from the same category",
)
async def list_related(
    product_id: str,
    catalog: CatalogStoreDependency,
    limit: int = Query(settings.RELATED_LIMIT, ge=1, le=20),
) -> list[Product]:
    try:
        product = await catalog.get_product(product_id)
    except SnapshotFetchError:
        logger.exception("Failed to load product %s", product_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog store unavailable",
        )
    if product is None:
        raise HTTPException(status_code=404, detail="Unknown product id")

    notices: list[str] = []
    products = await fetch_or_empty("products", catalog.get_products(), notices)
    return related_products(products, product, limit)
