from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.banksampah.routes.deps import current_operator
from apps.banksampah.services.errors import MemberNotFound, NoMemberSelected, ValidationError
from apps.banksampah.services.transaksi.kasir_session import KasirSession
from apps.banksampah.utils.envelope import ok
from apps.banksampah.utils.formatting import format_date, format_rupiah
from apps.banksampah.wiring import Services, get_services

router = APIRouter(prefix="/transaksi", tags=["transaksi"])


class SetorItem(BaseModel):
    jenis_sampah_id: str = Field(..., min_length=1)
    berat_kg: float = Field(..., description="Weight in kg, must be > 0")


class SetorRequest(BaseModel):
    id_nasabah: str
    items: List[SetorItem] = Field(default_factory=list)


class TarikRequest(BaseModel):
    id_nasabah: str
    amount: Union[int, float, str] = Field(..., description="Withdrawal amount in whole rupiah")


@router.post("/setor")
async def transaksi_setor(
    body: SetorRequest,
    services: Services = Depends(get_services),
    operator: Optional[str] = Depends(current_operator),
):
    if not body.id_nasabah.strip():
        raise NoMemberSelected()

    session = KasirSession(services.resolver, services.poster)
    if await session.check_member(body.id_nasabah) is None:
        raise MemberNotFound()

    catalog = {w.id: w for w in await services.catalog.list_active()}
    for item in body.items:
        waste_type = catalog.get(item.jenis_sampah_id)
        if waste_type is None:
            raise ValidationError(f"Jenis sampah {item.jenis_sampah_id} tidak ditemukan")
        session.add_line(waste_type, item.berat_kg)

    entry = await session.commit(operator)
    return ok(
        entry.to_dict(),
        meta={"message": f"Transaksi untuk {entry.member_name} berhasil disimpan ({format_rupiah(entry.total_amount)})"},
        status=201,
    )


@router.post("/tarik")
async def transaksi_tarik(
    body: TarikRequest,
    services: Services = Depends(get_services),
    operator: Optional[str] = Depends(current_operator),
):
    if not body.id_nasabah.strip():
        raise NoMemberSelected()

    member = await services.resolver.resolve_by_code(body.id_nasabah)
    if member is None:
        raise MemberNotFound()

    entry = await services.poster.post_withdrawal(member, body.amount, operator)
    return ok(
        entry.to_dict(),
        meta={"message": f"Penarikan {format_rupiah(-entry.total_amount)} untuk {entry.member_name} berhasil diproses"},
        status=201,
    )


@router.get("")
async def transaksi_list(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    id_nasabah: Optional[str] = None,
    services: Services = Depends(get_services),
):
    entries = await services.ledger.list_entries(start, end, id_nasabah)
    rows = []
    for e in entries:
        row = e.to_dict()
        row["tanggal"] = format_date(e.timestamp) if e.timestamp else None
        rows.append(row)
    return ok(rows, meta={"count": len(rows)})
