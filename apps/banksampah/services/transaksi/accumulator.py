from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple

from apps.banksampah.services.errors import InvalidWeight, ValidationError
from apps.banksampah.services.models import MAX_RUPIAH, MAX_WEIGHT_KG, Member, TransactionLine, WasteType

ZERO = Decimal("0")


def _finite(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return d if d.is_finite() else None


def _check_subtotal(value: Decimal) -> None:
    if value > MAX_RUPIAH:
        raise ValidationError("Nilai transaksi terlalu besar")


class LineAccumulator:
    """
    In-session line list of one deposit.

    Lines are keyed by waste type id. Adding the same waste type again merges
    weight and subtotal into the existing line, which keeps its position and
    its original unit price. Selecting a different member discards all lines.
    """

    def __init__(self) -> None:
        self._lines: List[TransactionLine] = []
        self._member_id: Optional[str] = None

    @property
    def lines(self) -> Tuple[TransactionLine, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def select_member(self, member: Optional[Member]) -> None:
        member_id = member.id if member else None
        if member_id != self._member_id:
            self._lines = []
        self._member_id = member_id

    def add_line(self, waste_type: WasteType, weight: Any, unit_price: Any = None) -> TransactionLine:
        weight_kg = _finite(weight)
        if weight_kg is None or weight_kg <= 0:
            raise InvalidWeight()
        if weight_kg > MAX_WEIGHT_KG:
            raise InvalidWeight("Berat melebihi batas 100.000 kg")

        price = waste_type.price_per_kg if unit_price is None else _finite(unit_price)
        if price is None or price < 0:
            raise ValidationError("Harga per kg harus berupa angka dan tidak boleh negatif")
        if price > MAX_RUPIAH:
            raise ValidationError("Harga per kg terlalu besar")

        subtotal = weight_kg * price
        for idx, line in enumerate(self._lines):
            if line.waste_type_id == waste_type.id:
                if line.weight_kg + weight_kg > MAX_WEIGHT_KG:
                    raise InvalidWeight("Berat melebihi batas 100.000 kg")
                _check_subtotal(line.subtotal + subtotal)
                merged = TransactionLine(
                    waste_type_id=line.waste_type_id,
                    waste_type_name=line.waste_type_name,
                    weight_kg=line.weight_kg + weight_kg,
                    price_per_kg=line.price_per_kg,
                    subtotal=line.subtotal + subtotal,
                )
                self._lines[idx] = merged
                return merged

        _check_subtotal(subtotal)
        line = TransactionLine(
            waste_type_id=waste_type.id,
            waste_type_name=waste_type.name,
            weight_kg=weight_kg,
            price_per_kg=price,
            subtotal=subtotal,
        )
        self._lines.append(line)
        return line

    def remove_line(self, waste_type_id: str) -> None:
        self._lines = [x for x in self._lines if x.waste_type_id != waste_type_id]

    def totals(self) -> Tuple[Decimal, Decimal]:
        weight = sum((x.weight_kg for x in self._lines), ZERO)
        amount = sum((x.subtotal for x in self._lines), ZERO)
        return weight, amount
