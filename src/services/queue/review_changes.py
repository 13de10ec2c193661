"""Redis client and publisher for review change notifications."""

from __future__ import annotations

import logging

import redis.asyncio as redis

from src.config import settings

logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return a singleton Redis client for the current process."""

    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


class ReviewChangePublisher:
    """Pushes payload-free "reviews changed" signals onto a Redis stream."""

    def __init__(self, client: redis.Redis, stream_key: str) -> None:
        self._client = client
        self._stream_key = stream_key

    async def publish(self, product_id: str | None = None) -> str:
        """Announce that reviews changed, optionally scoped to one product."""

        entry_id = await self._client.xadd(
            name=self._stream_key,
            fields={"product_id": product_id or ""},
            id="*",
        )
        logger.info(
            "Published review change",
            extra={"product_id": product_id, "stream": self._stream_key},
        )
        return entry_id


def get_review_change_publisher() -> ReviewChangePublisher:
    client = get_redis_client()
    return ReviewChangePublisher(client, settings.REVIEW_CHANGES_STREAM_KEY)
