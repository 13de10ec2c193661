"""Routes for review submission and rating aggregates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from redis.exceptions import RedisError

from src.config import settings
from src.models.review import RatingAggregate, RatingEvent, ReviewListing
from src.services.discovery.ratings import (
    aggregate_ratings,
    summarize_reviews,
    top_reviews,
)
from src.services.discovery.snapshots import fetch_or_empty
from src.services.storage.errors import SnapshotFetchError
from src.services.storage.ratings_store import RatingsStoreDependency
from src.services.storage.review_store import ReviewStoreDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Submit a rating for a product",
)
async def submit_review(payload: RatingEvent, store: ReviewStoreDependency) -> RatingEvent:
    try:
        return await store.add_review(payload)
    except RedisError:
        logger.exception("Failed to store review for %s", payload.product_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Review store unavailable",
        )


@router.get(
    "/ratings",
    response_model=dict[str, RatingAggregate],
    summary="Average rating per reviewed product",
)
async def list_ratings(
    store: ReviewStoreDependency,
    published: RatingsStoreDependency,
) -> dict[str, RatingAggregate]:
    """Serve the aggregates last published by the review worker.

    Falls back to aggregating the review list directly when the worker has not
    published yet or its copy is unreadable.
    """
    try:
        ratings = await published.fetch()
    except SnapshotFetchError as exc:
        logger.warning("Published ratings unavailable: %s", exc)
        ratings = None
    if ratings is not None:
        return ratings

    notices: list[str] = []
    events = await fetch_or_empty("reviews", store.get_reviews(), notices)
    return aggregate_ratings(events)


@router.get(
    "/top",
    response_model=list[RatingEvent],
    summary="Newest five-star reviews across the catalog",
)
async def list_top_reviews(
    store: ReviewStoreDependency,
    limit: int = Query(settings.TOP_REVIEWS_LIMIT, ge=1, le=100),
) -> list[RatingEvent]:
    notices: list[str] = []
    events = await fetch_or_empty("reviews", store.get_reviews(), notices)
    return top_reviews(events, limit)


@router.get(
    "/{product_id}",
    response_model=ReviewListing,
    summary="Reviews of one product, newest first",
)
async def list_product_reviews(
    product_id: str,
    store: ReviewStoreDependency,
    star: int | None = Query(None, ge=1, le=5),
) -> ReviewListing:
    """The summary always covers every review; ``star`` only narrows the list."""
    notices: list[str] = []
    events = await fetch_or_empty("reviews", store.get_reviews(product_id), notices)

    listed = [event for event in events if star is None or event.rating == star]
    listed.sort(key=lambda event: event.created_at, reverse=True)

    return ReviewListing(
        summary=summarize_reviews(product_id, events),
        reviews=listed,
        notices=notices,
    )
