"""Tests for voucher eligibility."""

from __future__ import annotations

from datetime import UTC, datetime

from src.models.voucher import Voucher
from src.services.vouchers import eligible_vouchers, is_eligible

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _voucher(**overrides) -> Voucher:
    fields = {
        "code": "WELCOME10",
        "title": "Welcome",
        "discount_type": "percent",
        "discount_value": 10,
        "quantity": 5,
        "used": 0,
    }
    fields.update(overrides)
    return Voucher(**fields)


def test_user_scoped_voucher_only_for_that_user():
    voucher = _voucher(user_id="U1", valid_to=datetime(2099, 1, 1, tzinfo=UTC))

    assert is_eligible(voucher, "U1", NOW)
    assert not is_eligible(voucher, "U2", NOW)
    assert not is_eligible(voucher, None, NOW)


def test_expired_voucher_is_never_eligible():
    for user_id in ("U1", "U2", None):
        voucher = _voucher(user_id="U1", valid_to=datetime(2020, 1, 1, tzinfo=UTC))
        assert not is_eligible(voucher, user_id, NOW)


def test_expiry_is_inclusive_and_tolerates_naive_timestamps():
    assert is_eligible(_voucher(valid_to=NOW), "U1", NOW)
    assert is_eligible(_voucher(valid_to=datetime(2024, 6, 1)), "U1", NOW)


def test_inactive_voucher_is_not_eligible():
    assert not is_eligible(_voucher(is_active=False), "U1", NOW)


def test_exhausted_voucher_stays_eligible_and_is_not_mutated():
    voucher = _voucher(quantity=3, used=3)

    result = eligible_vouchers([voucher], "U1", NOW)

    assert result == [voucher]
    assert voucher.remaining == 0
    assert voucher.used == 3


def test_eligible_vouchers_keeps_order():
    vouchers = [
        _voucher(code="A"),
        _voucher(code="B", user_id="someone-else"),
        _voucher(code="C", valid_to=None),
    ]

    assert [v.code for v in eligible_vouchers(vouchers, "U1", NOW)] == ["A", "C"]


def test_discount_labels():
    assert _voucher(discount_value=15).discount_label == "15% OFF"
    assert (
        _voucher(discount_type="fixed", discount_value=50000).discount_label
        == "50,000 OFF"
    )
