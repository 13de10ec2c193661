"""Routes for voucher publication and eligibility."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from redis.exceptions import RedisError

from src.models.voucher import EligibleVouchers, Voucher
from src.services.discovery.snapshots import fetch_or_empty
from src.services.storage.voucher_store import VoucherStoreDependency
from src.services.vouchers import eligible_vouchers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vouchers", tags=["vouchers"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add or replace a voucher",
)
async def save_voucher(payload: Voucher, store: VoucherStoreDependency) -> Voucher:
    try:
        return await store.save_voucher(payload)
    except RedisError:
        logger.exception("Failed to store voucher %s", payload.code)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Voucher store unavailable",
        )


@router.get(
    "/eligible",
    response_model=EligibleVouchers,
    summary="Vouchers the given user may see right now",
)
async def list_eligible(
    store: VoucherStoreDependency,
    user_id: str | None = None,
) -> EligibleVouchers:
    notices: list[str] = []
    vouchers = await fetch_or_empty("vouchers", store.get_active_vouchers(), notices)
    return EligibleVouchers(
        user_id=user_id,
        vouchers=eligible_vouchers(vouchers, user_id),
        notices=notices,
    )
