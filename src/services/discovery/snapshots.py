"""Materialize collaborator snapshots for one recompute cycle."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from src.models.catalog import CatalogSnapshot
from src.services.storage.catalog_store import CatalogStore
from src.services.storage.errors import SnapshotFetchError
from src.services.storage.review_store import ReviewStore
from src.services.storage.voucher_store import VoucherStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def fetch_or_empty(
    source: str, fetch: Awaitable[list[T]], notices: list[str]
) -> list[T]:
    """Await ``fetch``; a fetch failure degrades to an empty collection."""
    try:
        return await fetch
    except SnapshotFetchError as exc:
        logger.warning("Snapshot fetch failed for %s: %s", source, exc)
        notices.append(f"{source} are temporarily unavailable")
        return []


async def load_snapshot(
    catalog: CatalogStore,
    reviews: ReviewStore | None = None,
    vouchers: VoucherStore | None = None,
) -> tuple[CatalogSnapshot, list[str]]:
    """Pull every collection needed for a catalog view.

    Never raises for collaborator failures: the affected collection is empty
    and a human-readable notice is returned alongside the snapshot.
    """
    notices: list[str] = []
    snapshot = CatalogSnapshot(
        products=await fetch_or_empty("products", catalog.get_products(), notices),
        categories=await fetch_or_empty(
            "categories", catalog.get_categories(), notices
        ),
    )
    if reviews is not None:
        snapshot.reviews = await fetch_or_empty(
            "reviews", reviews.get_reviews(), notices
        )
    if vouchers is not None:
        snapshot.vouchers = await fetch_or_empty(
            "vouchers", vouchers.get_active_vouchers(), notices
        )
    return snapshot, notices
