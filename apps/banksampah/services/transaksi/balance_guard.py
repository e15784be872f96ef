"""
Withdrawal preconditions. Pure checks, no I/O.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from apps.banksampah.services.errors import InsufficientBalance, InvalidAmount, NoMemberSelected
from apps.banksampah.services.models import MAX_RUPIAH, Member


def parse_amount(raw: Any) -> int:
    """
    Normalize a withdrawal amount to whole rupiah.
    Accepts numbers and numeric strings; anything else raises InvalidAmount.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidAmount()
    try:
        d = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount()

    if not d.is_finite() or d <= 0:
        raise InvalidAmount()
    if d > MAX_RUPIAH:
        raise InvalidAmount("Jumlah penarikan terlalu besar")
    if d != d.to_integral_value():
        raise InvalidAmount("Jumlah penarikan harus dalam rupiah bulat")
    return int(d)


def check_withdrawal(member: Optional[Member], amount: Any) -> None:
    if member is None:
        raise NoMemberSelected()

    value = parse_amount(amount)
    if value > member.balance:
        raise InsufficientBalance()
