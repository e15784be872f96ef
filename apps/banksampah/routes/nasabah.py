from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.banksampah.routes.deps import require_operator
from apps.banksampah.services.errors import MemberNotFound
from apps.banksampah.utils.envelope import ok
from apps.banksampah.wiring import Services, get_services

router = APIRouter(prefix="/nasabah", tags=["nasabah"])


class NasabahCreate(BaseModel):
    id_nasabah: str = Field(..., min_length=1, description="Member code printed on the QR card")
    nama: str = Field(..., min_length=1)
    alamat: str = ""
    saldo: int = Field(0, ge=0, description="Opening balance in rupiah")


class NasabahUpdate(BaseModel):
    nama: Optional[str] = None
    alamat: Optional[str] = None


@router.get("/search")
async def nasabah_search(q: str = "", services: Services = Depends(get_services)):
    members = await services.directory.search(q)
    return ok([m.to_dict() for m in members], meta={"count": len(members)})


@router.get("/saldo")
async def nasabah_with_balance(services: Services = Depends(get_services)):
    """Members that can withdraw (saldo > 0)."""
    members = await services.directory.with_positive_balance()
    return ok([m.to_dict() for m in members], meta={"count": len(members)})


@router.get("/{id_nasabah}")
async def nasabah_check(id_nasabah: str, services: Services = Depends(get_services)):
    member = await services.resolver.resolve_by_code(id_nasabah)
    if member is None:
        raise MemberNotFound()
    return ok(member.to_dict())


@router.post("", dependencies=[Depends(require_operator)])
async def nasabah_create(body: NasabahCreate, services: Services = Depends(get_services)):
    key = await services.admin.create_member(body.id_nasabah, body.nama, body.alamat, body.saldo)
    return ok({"id": key}, status=201)


@router.patch("/{key}", dependencies=[Depends(require_operator)])
async def nasabah_update(key: str, body: NasabahUpdate, services: Services = Depends(get_services)):
    if await services.resolver.resolve_by_id(key) is None:
        raise MemberNotFound()
    await services.admin.update_member(key, body.model_dump(exclude_none=True))
    return ok({"id": key})


@router.delete("/{key}", dependencies=[Depends(require_operator)])
async def nasabah_delete(key: str, services: Services = Depends(get_services)):
    purged = await services.admin.remove_member(key)
    return ok({"id": key, "transaksi_dihapus": purged})
