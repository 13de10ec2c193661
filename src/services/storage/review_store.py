"""Review stream: rating events plus change notifications."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.review import RatingEvent
from src.services.queue.review_changes import ReviewChangePublisher, get_redis_client
from src.services.storage.errors import SnapshotFetchError

logger = logging.getLogger(__name__)


class ReviewStore:
    """Append-only list of rating events in Redis."""

    def __init__(
        self,
        client: redis.Redis,
        publisher: ReviewChangePublisher | None = None,
        reviews_key: str | None = None,
    ) -> None:
        self._client = client
        self._key = reviews_key or settings.REVIEWS_KEY
        self._publisher = publisher or ReviewChangePublisher(
            client, settings.REVIEW_CHANGES_STREAM_KEY
        )

    async def get_reviews(self, product_id: str | None = None) -> list[RatingEvent]:
        """Full review snapshot, optionally restricted to one product."""
        try:
            raw = await self._client.lrange(self._key, 0, -1)
        except RedisError as exc:
            raise SnapshotFetchError("reviews", str(exc)) from exc

        try:
            events = [RatingEvent.model_validate_json(value) for value in raw]
        except ValidationError as exc:
            raise SnapshotFetchError("reviews", f"invalid payload: {exc}") from exc

        if product_id is not None:
            events = [event for event in events if event.product_id == product_id]
        return events

    async def add_review(self, event: RatingEvent) -> RatingEvent:
        """Persist the event, then notify subscribers that reviews changed."""
        await self._client.rpush(self._key, event.model_dump_json())
        logger.info(
            "Stored review",
            extra={"product_id": event.product_id, "rating": event.rating},
        )
        try:
            await self._publisher.publish(event.product_id)
        except RedisError:
            # Subscribers fall back to their next full refresh.
            logger.exception("Failed to publish review change for %s", event.product_id)
        return event


def get_review_store() -> ReviewStore:
    """FastAPI dependency factory."""

    return ReviewStore(get_redis_client())


ReviewStoreDependency = Annotated[ReviewStore, Depends(get_review_store)]
