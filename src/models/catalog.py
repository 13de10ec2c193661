"""Facet selection and derived catalog view models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from src.models.product import Category, Product, RatedProduct
from src.models.review import RatingAggregate, RatingEvent
from src.models.voucher import Voucher


class SortKey(StrEnum):
    """Supported orderings for the catalog listing."""

    LATEST = "latest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"


class FacetSelection(BaseModel):
    """User-selected facet values consumed by the discovery pipeline."""

    selected_category: str | None = None
    price_range: tuple[float, float] = (0.0, float("inf"))
    search_text: str = ""
    selected_sizes: frozenset[str] = frozenset()
    selected_colors: frozenset[str] = frozenset()
    selected_ratings: frozenset[int] = frozenset()
    only_discount: bool = False
    sort_key: SortKey = SortKey.LATEST
    current_page: int = Field(1, ge=1)

    @field_validator("selected_ratings")
    @classmethod
    def _star_values(cls, values: frozenset[int]) -> frozenset[int]:
        if any(star < 1 or star > 5 for star in values):
            raise ValueError("Rating facet values must be between 1 and 5")
        return values

    @model_validator(mode="after")
    def _ordered_price_range(self) -> FacetSelection:
        low, high = self.price_range
        if low > high:
            raise ValueError("price_range minimum must not exceed maximum")
        return self


class CatalogSnapshot(BaseModel):
    """Materialized copies of every collaborator collection for one recompute."""

    products: list[Product] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    reviews: list[RatingEvent] = Field(default_factory=list)
    vouchers: list[Voucher] = Field(default_factory=list)


class FacetOptions(BaseModel):
    """Values the presentation layer can offer as facet choices."""

    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    min_price: float = 0.0
    max_price: float = 0.0
    categories: list[Category] = Field(default_factory=list)
    hot_category_ids: list[str] = Field(default_factory=list)


class CatalogView(BaseModel):
    """Derived view rebuilt from a snapshot and a facet selection."""

    items: list[RatedProduct] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_items: int = 0
    page_size: int
    suggestions: list[Product] = Field(default_factory=list)
    ratings: dict[str, RatingAggregate] = Field(default_factory=dict)
    facets: FacetOptions = Field(default_factory=FacetOptions)
    notices: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0
