"""Reduce review events into per-product rating aggregates."""

from __future__ import annotations

from collections.abc import Iterable

from src.models.review import RatingAggregate, RatingEvent, ReviewSummary


def aggregate_ratings(events: Iterable[RatingEvent]) -> dict[str, RatingAggregate]:
    """Return the average rating of every product that has at least one event.

    Products without events are absent from the mapping; callers must not
    read a missing entry as a zero-star rating.
    """
    totals: dict[str, list[int]] = {}
    for event in events:
        bucket = totals.setdefault(event.product_id, [0, 0])
        bucket[0] += event.rating
        bucket[1] += 1

    return {
        product_id: RatingAggregate(
            product_id=product_id,
            average=rating_sum / count,
            count=count,
        )
        for product_id, (rating_sum, count) in totals.items()
    }


def summarize_reviews(product_id: str, events: Iterable[RatingEvent]) -> ReviewSummary:
    summary = ReviewSummary(product_id=product_id)
    total = 0
    for event in events:
        if event.product_id != product_id:
            continue
        summary.count += 1
        summary.histogram[event.rating] += 1
        total += event.rating

    if summary.count:
        summary.average = round(total / summary.count, 1)
    return summary


def top_reviews(events: Iterable[RatingEvent], limit: int = 20) -> list[RatingEvent]:
    """Newest five-star reviews across the whole catalog."""
    praised = [event for event in events if event.rating == 5]
    praised.sort(key=lambda event: event.created_at, reverse=True)
    return praised[:limit]
