"""Voucher models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field


class Voucher(BaseModel):
    """Promotional code with scope and expiry metadata."""

    id: str | None = None
    code: str = Field(..., min_length=1)
    title: str
    description: str | None = None
    discount_type: Literal["percent", "fixed"]
    discount_value: float = Field(..., ge=0)
    min_order_value: float = Field(0, ge=0)
    max_discount: float | None = Field(None, ge=0)
    user_id: str | None = Field(
        None,
        description="Restricts the voucher to one user when set",
    )
    valid_to: datetime | None = None
    is_active: bool = True
    quantity: int = Field(0, ge=0)
    used: int = Field(0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining(self) -> int:
        """Display-only count of unused vouchers; not an eligibility gate."""
        return self.quantity - self.used

    @computed_field  # type: ignore[prop-decorator]
    @property
    def discount_label(self) -> str:
        if self.discount_type == "percent":
            return f"{self.discount_value:g}% OFF"
        return f"{self.discount_value:,.0f} OFF"


class EligibleVouchers(BaseModel):
    """Response body for the eligible voucher listing."""

    user_id: str | None = None
    vouchers: list[Voucher] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)
