"""Discovery pipeline entry points.

``compute_view`` is the pure function turning a snapshot plus a facet
selection into the derived catalog view. ``DiscoverySession`` keeps the
latest snapshot and selection for an interactive browser and rebuilds the
view after every input change.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from src.config import settings
from src.models.catalog import CatalogSnapshot, CatalogView, FacetSelection, SortKey
from src.models.product import Category, Product, RatedProduct
from src.models.review import RatingEvent
from src.models.voucher import Voucher
from src.services.discovery.filtering import filter_products, suggest_products
from src.services.discovery.highlights import facet_options, price_bounds, product_badge
from src.services.discovery.pagination import clamp_page, paginate
from src.services.discovery.predicates import build_predicate
from src.services.discovery.ratings import aggregate_ratings
from src.services.discovery.sorting import sort_products
from src.services.vouchers import eligible_vouchers

logger = logging.getLogger(__name__)


def compute_view(
    snapshot: CatalogSnapshot,
    selection: FacetSelection,
    *,
    page_size: int | None = None,
    suggestion_limit: int | None = None,
    now: datetime | None = None,
    notices: Iterable[str] = (),
) -> CatalogView:
    """Rebuild the full derived view from scratch."""
    size = page_size or settings.PAGE_SIZE
    ratings = aggregate_ratings(snapshot.reviews)
    predicate = build_predicate(selection, ratings)

    filtered = filter_products(snapshot.products, predicate)
    ordered = sort_products(filtered, selection.sort_key)
    page = paginate(ordered, size, selection.current_page)

    current = now or datetime.now(UTC)
    items = []
    for product in page.items:
        aggregate = ratings.get(product.id)
        items.append(
            RatedProduct(
                **product.model_dump(),
                rating=aggregate.average if aggregate else None,
                review_count=aggregate.count if aggregate else 0,
                badge=product_badge(product, current),
            )
        )

    logger.debug(
        "Catalog view rebuilt",
        extra={
            "products": len(snapshot.products),
            "matched": page.total_items,
            "page": page.page,
            "sort": str(selection.sort_key),
        },
    )

    return CatalogView(
        items=items,
        page=page.page,
        total_pages=page.total_pages,
        total_items=page.total_items,
        page_size=size,
        suggestions=suggest_products(
            snapshot.products, selection.search_text, suggestion_limit
        ),
        ratings=ratings,
        facets=facet_options(snapshot.products, snapshot.categories),
        notices=list(notices),
    )


def parse_price(value: Any) -> float | None:
    """Return ``value`` as a finite non-negative float, or None if malformed."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def resolve_price_range(
    bounds: tuple[float, float], low: Any = None, high: Any = None
) -> tuple[float, float]:
    """Turn raw range inputs into a valid range inside the observed bounds.

    Missing or malformed inputs fall back to the matching bound. When the
    requested minimum exceeds the maximum, the minimum snaps down to it.
    """
    floor, ceiling = bounds
    parsed_low = parse_price(low)
    parsed_high = parse_price(high)
    resolved_low = floor if parsed_low is None else min(max(parsed_low, floor), ceiling)
    resolved_high = (
        ceiling if parsed_high is None else min(max(parsed_high, floor), ceiling)
    )
    return min(resolved_low, resolved_high), resolved_high


class DiscoverySession:
    """Interactive catalog browser state.

    Every setter rebuilds ``view`` synchronously from the latest snapshot, so
    a stale result can never outlive a newer input. Filter and sort changes
    send the user back to the first page.
    """

    def __init__(
        self,
        *,
        user_id: str | None = None,
        page_size: int | None = None,
        suggestion_limit: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.user_id = user_id
        self.page_size = page_size or settings.PAGE_SIZE
        self.suggestion_limit = suggestion_limit
        self._clock = clock or (lambda: datetime.now(UTC))
        self._snapshot = CatalogSnapshot()
        self._bounds: tuple[float, float] = (0.0, 0.0)
        self._selection = FacetSelection(price_range=self._bounds)
        self.notices: list[str] = []
        self.eligible_vouchers: list[Voucher] = []
        self.view = self._build_view()

    @property
    def selection(self) -> FacetSelection:
        return self._selection

    @property
    def price_bounds(self) -> tuple[float, float]:
        return self._bounds

    # Snapshot inputs

    def apply_snapshot(
        self, snapshot: CatalogSnapshot, notices: Iterable[str] = ()
    ) -> CatalogView:
        """Replace every collection at once, e.g. after ``load_snapshot``."""
        self.notices = list(notices)
        self._snapshot = CatalogSnapshot()
        self.load_catalog(snapshot.products, snapshot.categories, recompute=False)
        self._snapshot.reviews = list(snapshot.reviews)
        self.replace_vouchers(snapshot.vouchers)
        return self._recompute()

    def load_catalog(
        self,
        products: Iterable[Product],
        categories: Iterable[Category] = (),
        *,
        recompute: bool = True,
    ) -> CatalogView:
        """Swap in a new product snapshot and clamp the price range to it."""
        self._snapshot.products = list(products)
        self._snapshot.categories = list(categories)
        self._bounds = price_bounds(self._snapshot.products)
        self._selection = self._selection.model_copy(
            update={"price_range": self._bounds, "current_page": 1}
        )
        if recompute:
            return self._recompute()
        return self.view

    def replace_reviews(self, reviews: Iterable[RatingEvent]) -> CatalogView:
        """Swap the full review snapshot; the aggregate is rebuilt, not merged."""
        self._snapshot.reviews = list(reviews)
        return self._recompute()

    def replace_vouchers(self, vouchers: Iterable[Voucher]) -> list[Voucher]:
        self._snapshot.vouchers = list(vouchers)
        return self._refresh_vouchers()

    def set_user(self, user_id: str | None) -> list[Voucher]:
        self.user_id = user_id
        return self._refresh_vouchers()

    # Facet setters

    def set_category(self, category_id: str | None) -> CatalogView:
        return self._update(selected_category=category_id or None)

    def set_search(self, search_text: str | None) -> CatalogView:
        return self._update(search_text=search_text or "")

    def set_sizes(self, sizes: Iterable[str]) -> CatalogView:
        return self._update(selected_sizes=frozenset(sizes))

    def toggle_size(self, size: str) -> CatalogView:
        return self.set_sizes(self._selection.selected_sizes ^ {size})

    def set_colors(self, colors: Iterable[str]) -> CatalogView:
        return self._update(selected_colors=frozenset(colors))

    def toggle_color(self, color: str) -> CatalogView:
        return self.set_colors(self._selection.selected_colors ^ {color})

    def set_ratings(self, stars: Iterable[int]) -> CatalogView:
        values = frozenset(int(star) for star in stars)
        if any(star < 1 or star > 5 for star in values):
            raise ValueError("Rating facet values must be between 1 and 5")
        return self._update(selected_ratings=values)

    def toggle_rating(self, star: int) -> CatalogView:
        return self.set_ratings(self._selection.selected_ratings ^ {star})

    def set_only_discount(self, only_discount: bool) -> CatalogView:
        return self._update(only_discount=bool(only_discount))

    def set_sort(self, sort_key: SortKey | str) -> CatalogView:
        return self._update(sort_key=SortKey(sort_key))

    def set_price_min(self, value: Any) -> CatalogView:
        """Edit the lower bound; malformed input keeps the previous value."""
        low, high = self._selection.price_range
        parsed = parse_price(value)
        if parsed is None:
            logger.debug("Ignoring malformed minimum price %r", value)
            return self.view
        low = min(self._clamp_to_bounds(parsed), high)
        return self._update(price_range=(low, high))

    def set_price_max(self, value: Any) -> CatalogView:
        """Edit the upper bound; malformed input keeps the previous value."""
        low, high = self._selection.price_range
        parsed = parse_price(value)
        if parsed is None:
            logger.debug("Ignoring malformed maximum price %r", value)
            return self.view
        high = max(self._clamp_to_bounds(parsed), low)
        return self._update(price_range=(low, high))

    def set_page(self, page: int) -> CatalogView:
        """Move to ``page``, silently clamped into the available range."""
        target = clamp_page(int(page), self.view.total_pages)
        self._selection = self._selection.model_copy(update={"current_page": target})
        return self._recompute()

    def clear_filters(self) -> CatalogView:
        return self._update(
            selected_category=None,
            price_range=self._bounds,
            search_text="",
            selected_sizes=frozenset(),
            selected_colors=frozenset(),
            selected_ratings=frozenset(),
            only_discount=False,
        )

    # Internals

    def _clamp_to_bounds(self, value: float) -> float:
        low, high = self._bounds
        return min(max(value, low), high)

    def _update(self, **changes: Any) -> CatalogView:
        changes["current_page"] = 1
        self._selection = self._selection.model_copy(update=changes)
        return self._recompute()

    def _recompute(self) -> CatalogView:
        self.view = self._build_view()
        # A shrinking result set must not leave the selection on a dead page.
        if self._selection.current_page != self.view.page:
            self._selection = self._selection.model_copy(
                update={"current_page": self.view.page}
            )
        return self.view

    def _build_view(self) -> CatalogView:
        return compute_view(
            self._snapshot,
            self._selection,
            page_size=self.page_size,
            suggestion_limit=self.suggestion_limit,
            now=self._clock(),
            notices=self.notices,
        )

    def _refresh_vouchers(self) -> list[Voucher]:
        self.eligible_vouchers = eligible_vouchers(
            self._snapshot.vouchers, self.user_id, self._clock()
        )
        return self.eligible_vouchers
