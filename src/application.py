"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from src.api.routes import include_api_routes
from src.config import settings
from src.services.queue.redis_stream import RedisStreamService
from src.services.queue.review_changes import get_redis_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events."""
    try:
        stream = RedisStreamService(
            get_redis_client(),
            settings.REVIEW_CHANGES_STREAM_KEY,
            settings.REVIEW_CHANGES_CONSUMER_GROUP,
        )
        await stream.ensure_consumer_group()
    except (RedisError, OSError):
        # Review publishing still works; the worker recreates the group.
        logger.exception("Failed to prepare review change stream on startup")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Storefront Catalog",
        description="Product discovery service: facets, sorting, ratings, vouchers",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
