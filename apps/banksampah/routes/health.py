from fastapi import APIRouter

from apps.banksampah.utils.settings import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_root():
    return {"ok": True, "store": settings.STORE_BACKEND, "version": settings.BANKSAMPAH_VERSION}
