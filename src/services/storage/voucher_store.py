"""Voucher store."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.voucher import Voucher
from src.services.queue.review_changes import get_redis_client
from src.services.storage.errors import SnapshotFetchError

logger = logging.getLogger(__name__)


class VoucherStore:
    """Vouchers keyed by code in a Redis hash."""

    def __init__(self, client: redis.Redis, vouchers_key: str | None = None) -> None:
        self._client = client
        self._key = vouchers_key or settings.VOUCHERS_KEY

    async def get_active_vouchers(self) -> list[Voucher]:
        try:
            raw = await self._client.hgetall(self._key)
        except RedisError as exc:
            raise SnapshotFetchError("vouchers", str(exc)) from exc

        try:
            vouchers = [Voucher.model_validate_json(value) for value in raw.values()]
        except ValidationError as exc:
            raise SnapshotFetchError("vouchers", f"invalid payload: {exc}") from exc

        return sorted(
            (voucher for voucher in vouchers if voucher.is_active),
            key=lambda v: v.code,
        )

    async def save_voucher(self, voucher: Voucher) -> Voucher:
        await self._client.hset(self._key, voucher.code, voucher.model_dump_json())
        logger.info("Stored voucher %s", voucher.code)
        return voucher


def get_voucher_store() -> VoucherStore:
    """FastAPI dependency factory."""

    return VoucherStore(get_redis_client())


VoucherStoreDependency = Annotated[VoucherStore, Depends(get_voucher_store)]
