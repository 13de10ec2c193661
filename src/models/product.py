"""Product domain models and API schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator


def ensure_utc(moment: datetime) -> datetime:
    """Read naive timestamps as UTC and convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


class Category(BaseModel):
    """Represents a category coming from the catalog store."""

    id: str = Field(..., min_length=1, description="Unique identifier of the category")
    name: str
    image_url: str | None = None


class Product(BaseModel):
    """Read-only product snapshot as supplied by the catalog store."""

    id: str = Field(..., min_length=1, description="Unique, stable product identifier")
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    discount_price: float | None = Field(
        None,
        description="Sale price, only honoured when strictly between 0 and price",
    )
    category_id: str | None = Field(
        None,
        description="Owning category; absent means uncategorized",
    )
    image_url: str | None = None
    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    sold: int = Field(0, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("created_at")
    @classmethod
    def _created_at_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def is_discounted(self) -> bool:
        """True when the discount price is a real markdown of the list price."""
        return (
            self.discount_price is not None
            and 0 < self.discount_price < self.price
        )


class RatedProduct(Product):
    """Product enriched with its review aggregate for presentation."""

    rating: float | None = Field(
        None,
        description="Average rating, None when the product has no reviews",
    )
    review_count: int = 0
    badge: str | None = None
