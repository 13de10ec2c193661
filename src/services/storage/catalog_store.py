"""Catalog store exposing product and category snapshots."""

from __future__ import annotations

import logging
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.config import settings
from src.models.product import Category, Product
from src.services.queue.review_changes import get_redis_client
from src.services.storage.errors import SnapshotFetchError

logger = logging.getLogger(__name__)


class CatalogStore:
    """Products and categories kept as JSON documents in Redis hashes."""

    def __init__(
        self,
        client: redis.Redis,
        products_key: str | None = None,
        categories_key: str | None = None,
    ) -> None:
        self._client = client
        self._products_key = products_key or settings.PRODUCTS_KEY
        self._categories_key = categories_key or settings.CATEGORIES_KEY

    async def get_products(self) -> list[Product]:
        """Return every product, oldest first with ties broken by id."""
        raw = await self._read_all(self._products_key, "products")
        try:
            products = [Product.model_validate_json(value) for value in raw]
        except ValidationError as exc:
            raise SnapshotFetchError("products", f"invalid payload: {exc}") from exc
        return sorted(products, key=lambda p: (p.created_at, p.id))

    async def get_product(self, product_id: str) -> Product | None:
        try:
            raw = await self._client.hget(self._products_key, product_id)
        except RedisError as exc:
            raise SnapshotFetchError("products", str(exc)) from exc
        if not raw:
            return None
        try:
            return Product.model_validate_json(raw)
        except ValidationError as exc:
            raise SnapshotFetchError("products", f"invalid payload: {exc}") from exc

    async def get_categories(self) -> list[Category]:
        raw = await self._read_all(self._categories_key, "categories")
        try:
            categories = [Category.model_validate_json(value) for value in raw]
        except ValidationError as exc:
            raise SnapshotFetchError("categories", f"invalid payload: {exc}") from exc
        return sorted(categories, key=lambda c: c.name)

    async def save_product(self, product: Product) -> Product:
        await self._client.hset(self._products_key, product.id, product.model_dump_json())
        logger.info("Stored product %s", product.id)
        return product

    async def save_category(self, category: Category) -> Category:
        await self._client.hset(
            self._categories_key, category.id, category.model_dump_json()
        )
        logger.info("Stored category %s", category.id)
        return category

    async def _read_all(self, key: str, source: str) -> list[str | bytes]:
        try:
            entries = await self._client.hgetall(key)
        except RedisError as exc:
            raise SnapshotFetchError(source, str(exc)) from exc
        return list(entries.values())


def get_catalog_store() -> CatalogStore:
    """FastAPI dependency factory."""

    return CatalogStore(get_redis_client())


CatalogStoreDependency = Annotated[CatalogStore, Depends(get_catalog_store)]
