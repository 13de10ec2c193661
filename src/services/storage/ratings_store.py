"""Persisted rating aggregates published by the review worker."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.review import RatingAggregate
from src.services.queue.review_changes import get_redis_client
from src.services.storage.errors import SnapshotFetchError


class RatingsStore:
    """Latest per-product rating aggregates, replaced wholesale on every refresh."""

    def __init__(self, client: redis.Redis, ratings_key: str | None = None):
        self._client = client
        self._key = ratings_key or settings.RATINGS_KEY

    async def save(self, ratings: dict[str, RatingAggregate]) -> None:
        payload = {
            "ratings": {
                product_id: aggregate.model_dump()
                for product_id, aggregate in ratings.items()
            },
            "updated_at": datetime.now(UTC).isoformat(),
        }
        await self._client.set(self._key, json.dumps(payload))

    async def fetch(self) -> dict[str, RatingAggregate] | None:
        """Return the persisted aggregates, or None when nothing was published yet."""
        try:
            raw = await self._client.get(self._key)
        except RedisError as exc:
            raise SnapshotFetchError("ratings", str(exc)) from exc
        if not raw:
            return None

        try:
            payload = json.loads(raw)
            return {
                product_id: RatingAggregate.model_validate(aggregate)
                for product_id, aggregate in payload["ratings"].items()
            }
        except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as exc:
            raise SnapshotFetchError("ratings", f"invalid payload: {exc}") from exc


def get_ratings_store() -> RatingsStore:
    """FastAPI dependency factory."""

    return RatingsStore(get_redis_client())


RatingsStoreDependency = Annotated[RatingsStore, Depends(get_ratings_store)]
