"""Review events and rating aggregates."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

from src.models.product import ensure_utc


class RatingEvent(BaseModel):
    """A single review rating as delivered by the review stream."""

    product_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    user_id: str | None = None
    comment: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("created_at")
    @classmethod
    def _created_at_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class RatingAggregate(BaseModel):
    """Average rating and event count for one product."""

    product_id: str
    average: float
    count: int = Field(..., ge=1)


class ReviewSummary(BaseModel):
    """Per-product review overview shown on the product detail view."""

    product_id: str
    count: int = 0
    average: float | None = Field(
        None,
        description="Average rounded to one decimal, None without reviews",
    )
    histogram: dict[int, int] = Field(
        default_factory=lambda: {star: 0 for star in range(1, 6)}
    )


class ReviewListing(BaseModel):
    """Response body for the product review listing."""

    summary: ReviewSummary
    reviews: list[RatingEvent] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)
