"""Worker that keeps a discovery session in sync with the review stream."""

from __future__ import annotations

import asyncio
import logging
import os
import socket
import uuid

from redis.exceptions import RedisError

from src.config import settings
from src.services.discovery.engine import DiscoverySession
from src.services.discovery.snapshots import load_snapshot
from src.services.queue.redis_stream import (
    RedisStreamService,
    StreamBatch,
    create_redis_stream_service,
)
from src.services.storage.catalog_store import CatalogStore
from src.services.storage.errors import SnapshotFetchError
from src.services.storage.ratings_store import RatingsStore
from src.services.storage.review_store import ReviewStore
from src.services.storage.voucher_store import VoucherStore
from src.services.workers.base import BaseWorker

logger = logging.getLogger(__name__)


class ReviewChangeWorker(BaseWorker):
    """Consumes review change signals and re-pulls the full review snapshot.

    Signals carry no data worth merging; a whole batch collapses into one
    re-fetch so only the newest snapshot ever reaches the session.
    """

    def __init__(
        self,
        *,
        redis_service: RedisStreamService,
        review_store: ReviewStore,
        session: DiscoverySession,
        ratings_store: RatingsStore | None = None,
        consumer_name: str | None = None,
    ) -> None:
        super().__init__(consumer_name)
        self.redis_service = redis_service
        self.review_store = review_store
        self.session = session
        self.ratings_store = ratings_store
        self.batch_size = settings.BATCH_MAX_MESSAGES
        self.block_ms = settings.BATCH_MAX_WAIT_MS

    async def run_forever(self) -> None:
        await self.redis_service.ensure_consumer_group()
        logger.info(
            "Review worker started",
            extra={
                "stream": self.redis_service.stream_key,
                "group": self.redis_service.group_name,
                "consumer": self.consumer_name,
            },
        )

        try:
            while not self.is_shutdown_requested():
                try:
                    entries = await self.redis_service.read_batch(
                        consumer_name=self.consumer_name,
                        count=self.batch_size,
                        block_ms=self.block_ms,
                    )
                except Exception as exc:
                    logger.error("Failed to read review changes: %s", exc, exc_info=True)
                    await asyncio.sleep(1)
                    continue

                if not entries:
                    continue

                await self._process_entries(entries)
        except asyncio.CancelledError:
            logger.info("Review worker %s cancelled", self.consumer_name)
            raise

    async def _process_entries(self, entries: StreamBatch) -> None:
        ack_ids: list[str] = []
        scopes: set[str | None] = set()

        for _stream, messages in entries:
            for message_id, data in messages:
                ack_ids.append(message_id)
                scopes.add(data.get("product_id") or None)

        if ack_ids:
            await self.refresh(scopes)

        try:
            await self.redis_service.acknowledge_messages(ack_ids)
            await self.redis_service.delete_messages(ack_ids)
        except Exception as exc:
            logger.error("Failed to ack/delete review signals: %s", exc, exc_info=True)

    async def refresh(self, scopes: set[str | None] | None = None) -> bool:
        """Re-pull every review and rebuild the session view.

        Returns False when the review store was unreachable; the session then
        keeps its previous snapshot until the next signal arrives.
        """
        try:
            reviews = await self.review_store.get_reviews()
        except SnapshotFetchError as exc:
            logger.warning("Review refresh skipped: %s", exc)
            return False

        self.session.replace_reviews(reviews)
        await self.publish_ratings()
        logger.info(
            "Review snapshot refreshed",
            extra={
                "reviews": len(reviews),
                "scopes": sorted(s for s in (scopes or set()) if s),
            },
        )
        return True

    async def publish_ratings(self) -> None:
        """Persist the session's current rating aggregates for the API to serve."""
        if self.ratings_store is None:
            return
        try:
            await self.ratings_store.save(self.session.view.ratings)
        except RedisError:
            logger.exception("Failed to publish refreshed ratings")

    @staticmethod
    def _build_consumer_name() -> str:
        hostname = socket.gethostname()
        pid = os.getpid()
        suffix = uuid.uuid4().hex[:6]
        return f"review-worker:{hostname}:{pid}:{suffix}"


async def create_review_worker() -> ReviewChangeWorker:
    redis_service = create_redis_stream_service()
    client = redis_service.client

    session = DiscoverySession()
    snapshot, notices = await load_snapshot(
        CatalogStore(client), ReviewStore(client), VoucherStore(client)
    )
    session.apply_snapshot(snapshot, notices)

    return ReviewChangeWorker(
        redis_service=redis_service,
        review_store=ReviewStore(client),
        session=session,
        ratings_store=RatingsStore(client),
    )


async def run_worker() -> None:
    worker = await create_review_worker()
    await worker.refresh()
    await worker.run_forever()


def main() -> None:
    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        logger.info("Review worker interrupted, exiting")


if __name__ == "__main__":
    main()
