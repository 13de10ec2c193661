"""Voucher eligibility rules."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from src.models.voucher import Voucher


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def is_eligible(voucher: Voucher, user_id: str | None, now: datetime) -> bool:
    """Active, scoped to nobody or to ``user_id``, and not yet expired.

    Remaining quantity is deliberately ignored; a fully used voucher stays
    visible until the store deactivates it.
    """
    if not voucher.is_active:
        return False
    if voucher.user_id and voucher.user_id != user_id:
        return False
    if voucher.valid_to is not None and _as_utc(voucher.valid_to) < _as_utc(now):
        return False
    return True


def eligible_vouchers(
    vouchers: Iterable[Voucher],
    user_id: str | None,
    now: datetime | None = None,
) -> list[Voucher]:
    current = now or datetime.now(UTC)
    return [voucher for voucher in vouchers if is_eligible(voucher, user_id, current)]
