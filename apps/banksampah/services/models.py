"""
Domain records
==============

Member and WasteType are transient copies of store records. TransactionLine
lives only inside an open cashier session. LedgerEntry is written once and
never mutated.

The store keeps the Indonesian column names (id_nasabah, nama, saldo, ...);
the mapping lives here so every adapter shares it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Tuple

LedgerKind = Literal["setor", "tarik"]

SYSTEM_OPERATOR = "System"

# upper bound for any single amount in rupiah; keeps totals inside a bigint column
MAX_RUPIAH = Decimal("1e15")
MAX_WEIGHT_KG = Decimal("100000")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def json_number(value: Decimal) -> Any:
    """Decimal -> int when integral, float otherwise (JSON-safe)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class Member:
    id: str
    member_code: str
    name: str
    address: str = ""
    balance: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, row: Dict[str, Any]) -> "Member":
        return cls(
            id=str(row.get("id")),
            member_code=str(row.get("id_nasabah") or ""),
            name=str(row.get("nama") or ""),
            address=str(row.get("alamat") or ""),
            balance=int(row.get("saldo") or 0),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "id_nasabah": self.member_code,
            "nama": self.name,
            "alamat": self.address,
            "saldo": int(self.balance),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class WasteType:
    id: str
    name: str
    price_per_kg: Decimal
    photo_url: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, row: Dict[str, Any]) -> "WasteType":
        return cls(
            id=str(row.get("id")),
            name=str(row.get("nama") or ""),
            price_per_kg=to_decimal(row.get("harga_kg") or 0),
            photo_url=str(row.get("foto_url") or ""),
            is_active=bool(row.get("is_active", True)),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nama": self.name,
            "harga_kg": json_number(self.price_per_kg),
            "foto_url": self.photo_url,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class TransactionLine:
    waste_type_id: str
    waste_type_name: str
    weight_kg: Decimal
    price_per_kg: Decimal
    subtotal: Decimal

    def to_item(self) -> Dict[str, Any]:
        # ledger items do not carry the waste type key
        return {
            "nama_sampah": self.waste_type_name,
            "berat_kg": json_number(self.weight_kg),
            "harga_kg": json_number(self.price_per_kg),
            "subtotal": json_number(self.subtotal),
        }


@dataclass(frozen=True)
class LedgerEntry:
    member_code: str
    member_name: str
    timestamp: datetime
    kind: LedgerKind
    total_amount: int
    total_weight_kg: Decimal = Decimal("0")
    items: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    processed_by: str = SYSTEM_OPERATOR
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        """Store payload, without the key (assigned by the store)."""
        return {
            "id_nasabah": self.member_code,
            "nama_nasabah": self.member_name,
            "timestamp": self.timestamp,
            "tipe": self.kind,
            "total_harga": int(self.total_amount),
            "total_berat_kg": json_number(self.total_weight_kg),
            "items": [dict(x) for x in self.items],
            "processed_by": self.processed_by,
            "created_at": self.created_at or self.timestamp,
        }

    @classmethod
    def from_record(cls, row: Dict[str, Any]) -> "LedgerEntry":
        items: List[Dict[str, Any]] = [x for x in (row.get("items") or []) if isinstance(x, dict)]
        return cls(
            id=str(row.get("id")),
            member_code=str(row.get("id_nasabah") or ""),
            member_name=str(row.get("nama_nasabah") or ""),
            timestamp=row.get("timestamp"),
            kind=row.get("tipe") or "setor",
            total_amount=int(row.get("total_harga") or 0),
            total_weight_kg=to_decimal(row.get("total_berat_kg") or 0),
            items=tuple(items),
            processed_by=row.get("processed_by") or SYSTEM_OPERATOR,
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self.to_record()
        out["id"] = self.id
        out["timestamp"] = self.timestamp.isoformat() if self.timestamp else None
        out["created_at"] = self.created_at.isoformat() if self.created_at else None
        return out
