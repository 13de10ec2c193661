"""System-level routes such as health checks."""

from __future__ import annotations

from fastapi import APIRouter
from redis.exceptions import RedisError

from src.config import settings
from src.services.queue.review_changes import get_redis_client

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Hello World endpoint used by smoke tests."""

    return {"message": "Hello World"}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint with Redis connectivity check."""

    try:
        await get_redis_client().ping()
        redis_status = "connected"
    except (RedisError, OSError):
        redis_status = "disconnected"

    return {
        "status": "healthy",
        "redis": redis_status,
        "environment": settings.ENVIRONMENT,
    }
