from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.banksampah.routes.deps import require_operator
from apps.banksampah.services.errors import ValidationError
from apps.banksampah.utils.envelope import ok
from apps.banksampah.wiring import Services, get_services

router = APIRouter(prefix="/jenis-sampah", tags=["jenis-sampah"])


class JenisSampahCreate(BaseModel):
    nama: str = Field(..., min_length=1)
    harga_kg: float = Field(..., ge=0, description="Price per kg in rupiah")
    foto_url: str = ""


class JenisSampahUpdate(BaseModel):
    nama: Optional[str] = None
    harga_kg: Optional[float] = Field(None, ge=0)
    foto_url: Optional[str] = None


async def _require(services: Services, key: str) -> None:
    if await services.catalog.get(key) is None:
        raise ValidationError("Jenis sampah tidak ditemukan", 404)


@router.get("")
async def jenis_sampah_list(services: Services = Depends(get_services)):
    items = await services.catalog.list_active()
    return ok([x.to_dict() for x in items], meta={"count": len(items)})


@router.post("", dependencies=[Depends(require_operator)])
async def jenis_sampah_create(body: JenisSampahCreate, services: Services = Depends(get_services)):
    key = await services.catalog.add(body.nama, body.harga_kg, body.foto_url)
    return ok({"id": key}, status=201)


@router.patch("/{key}", dependencies=[Depends(require_operator)])
async def jenis_sampah_update(key: str, body: JenisSampahUpdate, services: Services = Depends(get_services)):
    await _require(services, key)
    await services.catalog.update(key, body.model_dump(exclude_none=True))
    return ok({"id": key})


@router.delete("/{key}", dependencies=[Depends(require_operator)])
async def jenis_sampah_delete(key: str, services: Services = Depends(get_services)):
    await _require(services, key)
    await services.catalog.deactivate(key)
    return ok({"id": key, "is_active": False})
