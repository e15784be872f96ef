import pytest

from apps.banksampah.services.errors import InsufficientBalance, InvalidAmount, NoMemberSelected, ValidationError
from apps.banksampah.services.models import Member
from apps.banksampah.services.transaksi.balance_guard import check_withdrawal, parse_amount

MEMBER = Member(id="m-budi", member_code="NSB001", name="Budi Santoso", balance=14500)


def test_passes_within_balance():
    assert check_withdrawal(MEMBER, 5000) is None
    assert check_withdrawal(MEMBER, "14500") is None


def test_no_member():
    with pytest.raises(NoMemberSelected):
        check_withdrawal(None, 1000)


@pytest.mark.parametrize("amount", [0, -1000, "0", "-5", "abc", "", None, float("inf"), float("nan"), False])
def test_invalid_amount(amount):
    with pytest.raises(InvalidAmount):
        check_withdrawal(MEMBER, amount)


def test_fractional_amount_is_rejected():
    with pytest.raises(InvalidAmount):
        check_withdrawal(MEMBER, "1000.5")


def test_over_balance():
    with pytest.raises(InsufficientBalance) as exc:
        check_withdrawal(Member(id="x", member_code="X", name="X", balance=9500), 10000)
    assert isinstance(exc.value, ValidationError)
    assert exc.value.status_code == 400


def test_parse_amount_normalizes_to_int():
    assert parse_amount("5000") == 5000
    assert parse_amount(5000.0) == 5000
    assert parse_amount(" 1200 ") == 1200


@pytest.mark.parametrize("amount", ["1e999999999", "1E+19", 10**16])
def test_oversized_amount_is_rejected_without_expanding(amount):
    with pytest.raises(InvalidAmount):
        parse_amount(amount)
    with pytest.raises(InvalidAmount):
        check_withdrawal(MEMBER, amount)
