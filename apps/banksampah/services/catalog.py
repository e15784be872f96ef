from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from apps.banksampah.services.errors import ValidationError
from apps.banksampah.services.models import MAX_RUPIAH, WasteType, json_number
from apps.banksampah.services.store.base import BatchOp, DocumentStore, Filter, utcnow

log = logging.getLogger("banksampah.catalog")

WASTE_TYPES = "jenis_sampah"
EDITABLE = ("nama", "harga_kg", "foto_url")


def _price(raw: Any) -> Decimal:
    try:
        d = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Harga per kg harus berupa angka")
    if not d.is_finite() or d < 0:
        raise ValidationError("Harga per kg tidak boleh negatif")
    if d > MAX_RUPIAH:
        raise ValidationError("Harga per kg terlalu besar")
    return d


class WasteCatalog:
    """
    Waste-type catalog (jenis sampah). Deletion is a soft delete through
    is_active; inactive types disappear from list_active() but old ledger
    items keep their name snapshot.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def list_active(self) -> List[WasteType]:
        rows = await self.store.query(
            WASTE_TYPES,
            [Filter("is_active", "==", True)],
            order_by="created_at",
            descending=True,
        )
        return [WasteType.from_record(r) for r in rows]

    async def get(self, key: str) -> Optional[WasteType]:
        row = await self.store.fetch_one(WASTE_TYPES, key)
        return WasteType.from_record(row) if row else None

    async def add(self, name: str, price_per_kg: Any, photo_url: str = "") -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Nama jenis sampah harus diisi")

        now = utcnow()
        keys = await self.store.atomic_batch([
            BatchOp.create(WASTE_TYPES, {
                "nama": name,
                "harga_kg": json_number(_price(price_per_kg)),
                "foto_url": photo_url or "",
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            })
        ])
        log.info("Added waste type %s (%s)", name, keys[0] if keys else "?")
        return keys[0]

    async def update(self, key: str, changes: Dict[str, Any]) -> None:
        patch = {k: v for k, v in (changes or {}).items() if k in EDITABLE}
        if "harga_kg" in patch:
            patch["harga_kg"] = json_number(_price(patch["harga_kg"]))
        if "nama" in patch and not str(patch["nama"] or "").strip():
            raise ValidationError("Nama jenis sampah harus diisi")
        if not patch:
            return

        patch["updated_at"] = utcnow()
        await self.store.atomic_batch([BatchOp.update(WASTE_TYPES, key, patch)])

    async def deactivate(self, key: str) -> None:
        await self.store.atomic_batch([
            BatchOp.update(WASTE_TYPES, key, {"is_active": False, "updated_at": utcnow()})
        ])
        log.info("Deactivated waste type %s", key)
